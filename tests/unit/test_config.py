import pytest

from cashbook.config import settings as settings_module
from cashbook.config.settings import ConfigLoader, Settings

@pytest.fixture
def isolated_config_dirs(tmp_path, monkeypatch):
    """Point user and package config dirs at empty temp directories"""
    user_dir = tmp_path / "user"
    package_dir = tmp_path / "package"
    user_dir.mkdir()
    package_dir.mkdir()
    monkeypatch.setattr(settings_module, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(settings_module, "PACKAGE_CONFIG_DIR", package_dir)
    return user_dir, package_dir

@pytest.mark.unit
class TestConfigLoader:

    def test_bundled_defaults_load(self, monkeypatch):
        monkeypatch.delenv("CASHBOOK_LOG_LEVEL", raising=False)

        settings = ConfigLoader.load_settings()

        assert settings.subunits_per_unit == 100
        assert settings.currency == "THB"

    def test_bundled_categories_cover_both_types(self):
        categories = ConfigLoader.load_categories()
        assert {c["type"] for c in categories} == {"income", "expense"}

    def test_user_config_overrides_default(self, isolated_config_dirs):
        user_dir, package_dir = isolated_config_dirs
        (package_dir / "settings.json").write_text('{"currency": "THB"}')
        (user_dir / "settings.json").write_text('{"currency": "USD"}')

        assert ConfigLoader.load_config("settings.json") == {"currency": "USD"}

    def test_missing_config_raises(self, isolated_config_dirs):
        with pytest.raises(FileNotFoundError, match="nope.json"):
            ConfigLoader.load_config("nope.json")

    def test_env_overrides_log_level(self, monkeypatch):
        monkeypatch.setenv("CASHBOOK_LOG_LEVEL", "DEBUG")

        settings = ConfigLoader.load_settings({"log_level": "ERROR"})

        assert settings.log_level == "DEBUG"

    def test_unknown_keys_are_ignored(self, monkeypatch):
        monkeypatch.delenv("CASHBOOK_LOG_LEVEL", raising=False)

        settings = ConfigLoader.load_settings({"currency": "EUR", "theme": "dark"})

        assert settings == Settings(currency="EUR")

    def test_rejects_non_positive_subunits(self):
        with pytest.raises(ValueError):
            Settings.from_dict({"subunits_per_unit": 0})
