# tests/core/test_config_management.py
import pytest
import json

from ampify.core.managers.config_manager import ConfigManager
from ampify.core.utils.path_utils import PathUtils

# Een standaard, voorspelbare configuratie voor onze tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "validator": {
        "timeout": 60,
        "verify_output": False
    },
    "converter": {
        "replacement_tag": "div"
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Een fixture die een geïsoleerde testomgeving opzet voor de ConfigManager:
    - Plaatst een nep 'settings.json' bestand in een tijdelijke map.
    - Monkeypatched PathUtils om naar dit bestand te wijzen.
    - Herlaadt na de test de echte configuratie.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))

    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: settings_file)

    manager = ConfigManager()
    manager.reset()  # Forceer herladen vanuit ons nep-bestand

    yield manager

    monkeypatch.undo()
    manager.reset()


def test_config_manager_is_singleton():
    assert ConfigManager() is ConfigManager()


def test_config_manager_load(config_env):
    """Test of de manager de configuratie correct laadt."""
    config = config_env.get_all()
    assert config["debug"]["level"] == "WARNING"
    assert config["validator"]["timeout"] == 60


def test_config_manager_get_nested(config_env):
    """Test het ophalen van geneste waarden."""
    assert config_env.get_nested("converter.replacement_tag") == "div"
    assert config_env.get_nested("non.existent.key", "default") == "default"
    assert config_env.get_nested("debug.level.deeper", "fallback") == "fallback"


def test_config_manager_set_nested(config_env):
    """Test het aanpassen van waarden in het geheugen, inclusief type-casting."""
    config_env.set_nested("debug.level", "INFO")
    assert config_env.get_nested("debug.level") == "INFO"

    config_env.set_nested("new_feature.enabled", True)
    assert config_env.get_nested("new_feature.enabled") is True

    # De originele waarde is een int, dus '20' moet een int worden
    config_env.set_nested("validator.timeout", "20")
    assert config_env.get_nested("validator.timeout") == 20

    # En een bool blijft een bool
    config_env.set_nested("validator.verify_output", "true")
    assert config_env.get_nested("validator.verify_output") is True


def test_config_manager_reset(config_env):
    """Test of de reset-functie de configuratie herlaadt vanaf schijf."""
    config_env.set_nested("debug.level", "DEBUG")
    assert config_env.get_nested("debug.level") == "DEBUG"

    config_env.reset()

    assert config_env.get_nested("debug.level") == "WARNING"


def test_config_manager_missing_file(tmp_path, monkeypatch):
    """Een ontbrekend settings.json levert een lege configuratie op."""
    monkeypatch.setattr(PathUtils, 'get_settings_file', lambda: tmp_path / "missing.json")
    manager = ConfigManager()
    manager.reset()
    try:
        assert manager.get_all() == {}
        assert manager.get_nested("converter.lang", "en") == "en"
    finally:
        monkeypatch.undo()
        manager.reset()


def test_packaged_settings_are_complete():
    """Het meegeleverde settings.json bevat de secties waar de converter op leunt."""
    settings = json.loads(PathUtils.get_settings_file().read_text(encoding="utf-8"))
    for section in ("debug", "console", "renderer", "session", "validator", "converter"):
        assert section in settings
    assert settings["converter"]["original_file_name"] == "original.html"
    assert settings["converter"]["modified_file_name"] == "modified.html"
    assert settings["converter"]["css_file_name"] == "inline.css"
