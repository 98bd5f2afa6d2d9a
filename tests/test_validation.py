# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for result validation, post-processing and outcome assembly."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers.fakes import RecordingLogger, make_tool
from xcompile.core.models import Diagnostic, ProcessExit, ValidationResult
from xcompile.execution import apply_post_processing, assemble_outcome, validate_result
from xcompile.filesystem import RetryPolicy

POLICY = RetryPolicy(attempts=2, initial_wait=0.0, max_wait=0.0, deadline=None)


@pytest.mark.asyncio
async def test_zero_exit_reads_target(tmp_path: Path, logger: RecordingLogger) -> None:
    target = tmp_path / "site.css"
    target.write_text("body{color:red}", encoding="utf-8")

    result = await validate_result(
        ProcessExit(0), target, "", tool=make_tool("copy"), logger=logger, retry_policy=POLICY
    )

    assert result == ValidationResult(is_success=True, result_text="body{color:red}")


@pytest.mark.asyncio
async def test_undecodable_output_is_failure(tmp_path: Path, logger: RecordingLogger) -> None:
    target = tmp_path / "site.css"
    target.write_bytes(b"body{content:'\xe9'}")

    result = await validate_result(
        ProcessExit(0), target, "", tool=make_tool("copy"), logger=logger, retry_policy=POLICY
    )

    assert not result.is_success
    assert result.result_text is None
    assert result.diagnostics[0].file_name == str(target)
    assert "not valid UTF-8" in result.diagnostics[0].message
    assert logger.messages[0].startswith("FakeLess: site.css compilation failed.")


@pytest.mark.asyncio
async def test_zero_exit_without_target_path_succeeds(logger: RecordingLogger) -> None:
    result = await validate_result(ProcessExit(0), None, "", tool=make_tool("copy"), logger=logger, retry_policy=POLICY)

    assert result.is_success
    assert result.result_text is None


@pytest.mark.asyncio
async def test_missing_output_is_failure(tmp_path: Path, logger: RecordingLogger) -> None:
    target = tmp_path / "site.css"

    result = await validate_result(
        ProcessExit(0), target, "", tool=make_tool("no-output"), logger=logger, retry_policy=POLICY
    )

    assert not result.is_success
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].file_name == str(target)
    assert "was not created" in result.diagnostics[0].message
    assert logger.messages[0].startswith("FakeLess: site.css compilation failed.")


@pytest.mark.asyncio
async def test_missing_output_allowed_when_tool_signals_by_exit_code(tmp_path: Path, logger: RecordingLogger) -> None:
    tool = make_tool("no-output", expects_output_file=False)

    result = await validate_result(
        ProcessExit(0), tmp_path / "site.css", "", tool=tool, logger=logger, retry_policy=POLICY
    )

    assert result == ValidationResult(is_success=True)
    assert logger.messages == []


@pytest.mark.asyncio
async def test_nonzero_exit_uses_parsed_diagnostics(tmp_path: Path, logger: RecordingLogger) -> None:
    result = await validate_result(
        ProcessExit(1),
        tmp_path / "site.css",
        "site.less:3:5: unexpected token",
        tool=make_tool("error"),
        logger=logger,
        retry_policy=POLICY,
    )

    assert not result.is_success
    assert result.result_text is None
    assert result.diagnostics == (Diagnostic(file_name="site.less", message="unexpected token", line=3, column=5),)


@pytest.mark.asyncio
async def test_nonzero_exit_without_output_names_exit_code(tmp_path: Path, logger: RecordingLogger) -> None:
    result = await validate_result(
        ProcessExit(3), tmp_path / "site.css", "", tool=make_tool("silent-fail"), logger=logger, retry_policy=POLICY
    )

    assert result.diagnostics == (Diagnostic(message="FakeLess exited with code 3"),)


@pytest.mark.asyncio
async def test_timeout_is_reported_first(tmp_path: Path, logger: RecordingLogger) -> None:
    result = await validate_result(
        ProcessExit(124, timed_out=True),
        tmp_path / "site.css",
        "site.less:1:1: still going",
        tool=make_tool("sleep"),
        logger=logger,
        retry_policy=POLICY,
    )

    assert not result.is_success
    assert "timeout" in result.diagnostics[0].message
    assert result.diagnostics[1].message == "still going"


@pytest.mark.asyncio
async def test_post_processing_writes_changed_text(tmp_path: Path, logger: RecordingLogger) -> None:
    target = tmp_path / "site.css"
    target.write_text("body{}", encoding="utf-8")

    async def banner(text: str, source: Path, destination: Path) -> str:
        return f"/* {source.name} */\n{text}"

    tool = make_tool("copy", post_processor=banner)
    validation = ValidationResult(is_success=True, result_text="body{}")

    result = await apply_post_processing(
        validation, tmp_path / "site.less", target, tool=tool, logger=logger, retry_policy=POLICY
    )

    assert result.result_text == "/* site.less */\nbody{}"
    assert target.read_text(encoding="utf-8") == "/* site.less */\nbody{}"


@pytest.mark.asyncio
async def test_post_processing_skips_unchanged_text(tmp_path: Path, logger: RecordingLogger) -> None:
    target = tmp_path / "site.css"
    validation = ValidationResult(is_success=True, result_text="body{}")

    result = await apply_post_processing(
        validation, tmp_path / "site.less", target, tool=make_tool("copy"), logger=logger, retry_policy=POLICY
    )

    assert result is validation
    assert not target.exists()


@pytest.mark.asyncio
async def test_post_processing_not_invoked_for_failures(tmp_path: Path, logger: RecordingLogger) -> None:
    calls: list[str] = []

    async def record(text: str, source: Path, target: Path) -> str:
        calls.append(text)
        return text

    failure = ValidationResult.failure(Diagnostic(message="boom"))
    empty_success = ValidationResult(is_success=True)
    tool = make_tool("error", post_processor=record)

    for validation in (failure, empty_success):
        result = await apply_post_processing(
            validation, tmp_path / "a.less", tmp_path / "a.css", tool=tool, logger=logger, retry_policy=POLICY
        )
        assert result is validation
    assert calls == []


@pytest.mark.asyncio
async def test_post_processing_write_failure_becomes_diagnostic(
    tmp_path: Path, logger: RecordingLogger, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def shout(text: str, source: Path, target: Path) -> str:
        return text.upper()

    def refuse(self: Path, *args: object, **kwargs: object) -> int:
        raise PermissionError(13, "locked", str(self))

    monkeypatch.setattr(Path, "write_text", refuse)
    target = tmp_path / "site.css"

    result = await apply_post_processing(
        ValidationResult(is_success=True, result_text="body{}"),
        tmp_path / "site.less",
        target,
        tool=make_tool("copy", post_processor=shout),
        logger=logger,
        retry_policy=POLICY,
    )

    assert not result.is_success
    assert result.diagnostics[0].file_name == str(target)
    assert "post-processed" in result.diagnostics[0].message
    assert logger.messages


def test_assemble_success(tmp_path: Path, logger: RecordingLogger) -> None:
    source = tmp_path / "site.less"
    target = tmp_path / "site.css"

    outcome = assemble_outcome(
        ValidationResult(is_success=True, result_text="body{}"),
        source=source,
        target=target,
        map_file=None,
        service_name="FakeLess",
        logger=logger,
    )

    assert outcome.is_success
    assert outcome.source_file_name == source
    assert outcome.target_file_name == target
    assert outcome.result_text == "body{}"
    assert outcome.diagnostics == ()
    assert logger.messages == []


def test_assemble_failure_logs_first_message(tmp_path: Path, logger: RecordingLogger) -> None:
    validation = ValidationResult.failure(Diagnostic(message="unexpected token"), Diagnostic(message="second"))

    outcome = assemble_outcome(
        validation,
        source=tmp_path / "site.less",
        target=tmp_path / "site.css",
        map_file=tmp_path / "site.css.map",
        service_name="FakeLess",
        logger=logger,
    )

    assert not outcome.is_success
    assert outcome.result_text is None
    assert outcome.first_error_message == "unexpected token"
    assert logger.messages == ["FakeLess: site.less compilation failed: unexpected token"]
