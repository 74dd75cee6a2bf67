# tests/core/test_convert_handler.py
import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

from ampify.app import main
from ampify.core.exceptions import RenderError, ValidatorUnavailableError
from ampify.core.handlers.convert_handler import handle_convert
from ampify.core.managers.config_manager import config_manager
from converter.model import ConversionResult


def _result(tmp_path: Path) -> ConversionResult:
    return ConversionResult(
        url="https://example.com",
        domain="https://example.com",
        original_path=tmp_path / "original.html",
        modified_path=tmp_path / "modified.html",
        validation_status="FAIL",
        initial_error_count=3,
        removed_attributes=["onclick"],
        replaced_tags=["my-widget"],
        duration=0.5,
    )


@pytest.fixture
def mock_controller(tmp_path):
    controller = MagicMock()
    controller.run = AsyncMock(return_value=_result(tmp_path))
    return controller


def test_missing_url_prints_usage(capsys):
    """Zonder --url wordt een voorbeeld getoond en niets verwerkt."""
    controller = MagicMock()
    exit_code = handle_convert([], controller=controller)

    assert exit_code == 2
    captured = capsys.readouterr()
    assert "Must provide a url parameter" in captured.out
    assert "ampify --url https://www.example.com" in captured.out
    controller.run.assert_not_called()


def test_help_exits_cleanly(capsys):
    assert handle_convert(["--help"]) == 0
    assert "--url" in capsys.readouterr().out


def test_unknown_flag_is_usage_error(capsys):
    assert handle_convert(["--bogus"]) == 2


def test_convert_success(mock_controller, tmp_path):
    css = tmp_path / "site.css"
    args = ["--url", "https://example.com", "--output-dir", str(tmp_path), "--css", str(css), "--verify"]

    exit_code = handle_convert(args, controller=mock_controller)

    assert exit_code == 0
    mock_controller.run.assert_awaited_once()
    settings = mock_controller.run.await_args.args[0]
    assert settings.url == "https://example.com"
    assert settings.output_dir == tmp_path
    assert settings.css_path == css
    assert settings.render is True
    assert settings.verify_output is True
    assert settings.original_file_name == "original.html"
    assert settings.modified_file_name == "modified.html"


def test_convert_defaults_to_working_directory(mock_controller, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    exit_code = handle_convert(["--url", "https://example.com", "--no-render"], controller=mock_controller)

    assert exit_code == 0
    settings = mock_controller.run.await_args.args[0]
    assert settings.output_dir == tmp_path
    assert settings.css_path == tmp_path / "inline.css"
    assert settings.render is False


@pytest.mark.parametrize("error", [
    RenderError("https://example.com", "net::ERR_NAME_NOT_RESOLVED"),
    ValidatorUnavailableError("AMP validator executable 'amphtml-validator' not found"),
])
def test_expected_failures_return_one(error, tmp_path, capsys):
    """Verwachte fouten worden gelogd en leveren exit code 1 op, zonder traceback."""
    controller = MagicMock()
    controller.run = AsyncMock(side_effect=error)

    exit_code = handle_convert(["--url", "https://example.com", "--output-dir", str(tmp_path)], controller=controller)

    assert exit_code == 1
    out = capsys.readouterr().out
    assert "Error:" in out
    assert "Traceback" not in out


def test_unexpected_failure_returns_one(tmp_path):
    controller = MagicMock()
    controller.run = AsyncMock(side_effect=RuntimeError("kapot"))
    assert handle_convert(["--url", "https://example.com", "--output-dir", str(tmp_path)], controller=controller) == 1


@patch('ampify.app.handle_convert')
@patch('ampify.app.configure_logger')
def test_main_configures_logging_first(mock_configure, mock_handle):
    mock_handle.return_value = 0
    assert main(["--url", "https://example.com", "--log-level", "DEBUG"]) == 0
    mock_configure.assert_called_once_with("DEBUG")
    mock_handle.assert_called_once_with(["--url", "https://example.com", "--log-level", "DEBUG"])


def test_flags_are_written_into_config(mock_controller, tmp_path):
    """--verify en --log-level overschrijven de waarden uit settings.json."""
    assert config_manager.get_nested("validator.verify_output") is False

    args = ["--url", "https://example.com", "--output-dir", str(tmp_path), "--verify", "--log-level", "debug"]
    assert handle_convert(args, controller=mock_controller) == 0

    assert config_manager.get_nested("validator.verify_output") is True
    assert config_manager.get_nested("debug.level") == "DEBUG"


def test_verify_comes_from_config_without_flag(mock_controller, tmp_path):
    config_manager.set_nested("validator.verify_output", "yes")
    handle_convert(["--url", "https://example.com", "--output-dir", str(tmp_path)], controller=mock_controller)

    settings = mock_controller.run.await_args.args[0]
    assert settings.verify_output is True
