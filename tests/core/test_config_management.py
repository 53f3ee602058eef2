# tests/core/test_config_management.py
import json

import pytest

from report_parser.controllers.extract_controller import ReportExtractor
from review_shell.core.managers.config_manager import ConfigManager
from review_shell.core.utils.path_utils import PathUtils

# A small, predictable configuration for the tests
MOCK_SETTINGS_CONTENT = {
    "debug": {
        "level": "WARNING"
    },
    "parser": {
        "features": "html5lib",
        "show_progress": False,
        "roles": {
            "player": "You: ",
            "reference": "Bot: "
        }
    },
    "report": {
        "precision": 3
    }
}


@pytest.fixture
def config_env(tmp_path, monkeypatch):
    """
    Sets up an isolated environment for the ConfigManager:
    - Writes a fake settings.json into a temporary directory.
    - Monkeypatches PathUtils to point at it.
    The real settings are reloaded afterwards.
    """
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(MOCK_SETTINGS_CONTENT))
    monkeypatch.setattr(PathUtils, "get_settings_file", lambda: settings_file)

    # ConfigManager is a singleton that is already loaded; force a reload.
    manager = ConfigManager()
    manager.reset()

    yield manager

    monkeypatch.undo()
    manager.reset()


def test_config_manager_is_singleton():
    assert ConfigManager() is ConfigManager()


def test_config_manager_load(config_env):
    assert config_env.get_nested("debug.level") == "WARNING"
    assert config_env.get_nested("parser.roles.player") == "You: "


def test_config_manager_get_nested(config_env):
    assert config_env.get_nested("report.precision") == 3
    assert config_env.get_nested("non.existent.key", "default") == "default"
    assert config_env.get_nested("report.precision.deeper", "default") == "default"


def test_config_manager_set_nested(config_env):
    config_env.set_nested("debug.level", "INFO")
    assert config_env.get_nested("debug.level") == "INFO"

    config_env.set_nested("new_feature.enabled", True)
    assert config_env.get_nested("new_feature.enabled") is True

    # The original is an int, so '5' is cast to 5
    config_env.set_nested("report.precision", "5")
    assert config_env.get_nested("report.precision") == 5

    # Booleans given as strings are interpreted, not cast with bool()
    config_env.set_nested("parser.show_progress", "false")
    assert config_env.get_nested("parser.show_progress") is False
    config_env.set_nested("parser.show_progress", "true")
    assert config_env.get_nested("parser.show_progress") is True


def test_config_manager_reset(config_env):
    config_env.set_nested("report.precision", 1)
    config_env.reset()
    assert config_env.get_nested("report.precision") == 3


def test_missing_settings_file_gives_empty_config(tmp_path, monkeypatch):
    monkeypatch.setattr(PathUtils, "get_settings_file", lambda: tmp_path / "absent.json")
    manager = ConfigManager()
    manager.reset()
    try:
        assert manager.get_nested("parser") is None
        settings = ReportExtractor.settings_from_config()
        assert settings.player_label == "Player: "
        assert settings.features == "html5lib"
    finally:
        monkeypatch.undo()
        manager.reset()


def test_extractor_settings_follow_config(config_env):
    settings = ReportExtractor.settings_from_config()
    assert settings.player_label == "You: "
    assert settings.reference_label == "Bot: "
    assert settings.show_progress is False


def test_shipped_settings_file_is_valid_json():
    data = json.loads(PathUtils.get_settings_file().read_text(encoding="utf-8"))
    assert data["parser"]["roles"] == {"player": "Player: ", "reference": "Mortal: "}


def test_config_manager_get_bool(config_env):
    assert config_env.get_bool("parser.show_progress") is False
    assert config_env.get_bool("non.existent.flag", True) is True
    config_env.set_nested("new_feature.enabled", "yes")
    assert config_env.get_bool("new_feature.enabled") is True


@pytest.mark.parametrize("stored, expected", [("false", False), ("0", False), ("true", True), (1, True)])
def test_progress_flag_stored_as_text_is_interpreted(tmp_path, monkeypatch, stored, expected):
    content = json.loads(json.dumps(MOCK_SETTINGS_CONTENT))
    content["parser"]["show_progress"] = stored
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps(content))
    monkeypatch.setattr(PathUtils, "get_settings_file", lambda: settings_file)
    manager = ConfigManager()
    manager.reset()
    try:
        assert ReportExtractor.settings_from_config().show_progress is expected
    finally:
        monkeypatch.undo()
        manager.reset()
