# tests/validator/test_amp_validator_service.py
import asyncio
import json

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from ampify.core.exceptions import ValidatorUnavailableError
from validator.services.amp_validator_service import AmpValidatorService

CLI_OUTPUT = {
    "-": {
        "status": "FAIL",
        "errors": [
            {
                "severity": "ERROR",
                "line": 12,
                "col": 4,
                "message": "The attribute 'onclick' may not appear in tag 'div'.",
                "specUrl": "https://amp.dev/documentation/guides-and-tutorials/learn/spec/amphtml#links",
                "code": "DISALLOWED_ATTR",
                "params": ["onclick", "div"],
            },
            {
                "severity": "ERROR",
                "line": 1,
                "col": 0,
                "message": "The mandatory tag 'amphtml engine script' is missing or incorrect.",
                "specUrl": None,
                "code": "MANDATORY_TAG_MISSING",
                "params": ["amphtml engine script"],
            },
        ],
    }
}


def _fake_process(stdout: bytes, stderr: bytes = b"", returncode: int = 1):
    proc = MagicMock()
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    proc.wait = AsyncMock(return_value=returncode)
    proc.returncode = returncode
    return proc


def test_parse_output():
    report = AmpValidatorService.parse_output(json.dumps(CLI_OUTPUT))

    assert report.status == "FAIL"
    assert len(report.errors) == 2
    first = report.errors[0]
    assert (first.line, first.col, first.code, first.params) == (12, 4, "DISALLOWED_ATTR", ["onclick", "div"])
    assert report.messages[0] == "line 12, col 4: The attribute 'onclick' may not appear in tag 'div'."
    assert report.errors[1].spec_url is None


def test_parse_output_pass_without_errors():
    report = AmpValidatorService.parse_output('{"-": {"status": "PASS", "errors": []}}')
    assert report.passed
    assert report.errors == []


@pytest.mark.parametrize("output", ["", "not json", "[]", '{"-": "weird"}'])
def test_parse_output_unreadable(output):
    assert AmpValidatorService.parse_output(output) is None


def test_validate_pipes_html_to_cli():
    """De HTML gaat via stdin naar de CLI; exit code 1 (FAIL) is geen fout."""
    service = AmpValidatorService({"command": ["npx", "amphtml-validator"], "timeout": 5})
    proc = _fake_process(json.dumps(CLI_OUTPUT).encode("utf-8"))

    with patch("validator.services.amp_validator_service.asyncio.create_subprocess_exec",
               new=AsyncMock(return_value=proc)) as mock_exec:
        report = asyncio.run(service.validate("<html>ü</html>"))

    args = mock_exec.await_args.args
    assert list(args) == ["npx", "amphtml-validator", "--format=json", "-"]
    proc.communicate.assert_awaited_once_with(input="<html>ü</html>".encode("utf-8"))
    assert report.status == "FAIL"
    assert len(report.errors) == 2


def test_validate_missing_executable():
    service = AmpValidatorService({})
    with patch("validator.services.amp_validator_service.asyncio.create_subprocess_exec",
               new=AsyncMock(side_effect=FileNotFoundError("amphtml-validator"))):
        with pytest.raises(ValidatorUnavailableError, match="not found"):
            asyncio.run(service.validate("<html></html>"))


def test_validate_unreadable_output():
    service = AmpValidatorService({"command": "amphtml-validator"})
    proc = _fake_process(b"", b"Error: Cannot find module\nmore", returncode=1)
    with patch("validator.services.amp_validator_service.asyncio.create_subprocess_exec",
               new=AsyncMock(return_value=proc)):
        with pytest.raises(ValidatorUnavailableError, match="Cannot find module"):
            asyncio.run(service.validate("<html></html>"))


def test_validator_js_option():
    service = AmpValidatorService({"validator_js": "/opt/validator.js"})
    assert service._build_args() == ["amphtml-validator", "--format=json", "--validator_js=/opt/validator.js", "-"]


def test_validate_timeout_kills_process():
    """Een vastgelopen validator wordt gestopt en meldt zich als niet beschikbaar."""
    service = AmpValidatorService({"timeout": 0.01})
    proc = _fake_process(b"")

    async def _hang(input=None):
        await asyncio.sleep(5)

    proc.communicate = AsyncMock(side_effect=_hang)
    proc.kill = MagicMock()

    with patch("validator.services.amp_validator_service.asyncio.create_subprocess_exec",
               new=AsyncMock(return_value=proc)):
        with pytest.raises(ValidatorUnavailableError, match="timed out after 0.01s"):
            asyncio.run(service.validate("<html></html>"))

    proc.kill.assert_called_once()
    proc.wait.assert_awaited_once()
