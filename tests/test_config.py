"""Test configuration loading"""

from pathlib import Path

import pytest

from spotify_private_api.core.config import DEFAULT_TIMEOUT, ENV_OVERRIDES, load_config
from spotify_private_api.core.exceptions import ConfigError


VALID_CONFIG = """
spotify:
  sp_dc: "dc-cookie"
  sp_key: "key-cookie"
  user_id: "someuser"

session:
  timeout: 5

logging:
  directory: null
"""


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real credentials in the environment out of the tests"""
    for env_var in ENV_OVERRIDES:
        monkeypatch.delenv(env_var, raising=False)


def write_config(directory: Path, content: str) -> Path:
    path = directory / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadConfig:
    """Test load_config"""

    def test_valid_file(self, temp_dir):
        config = load_config(write_config(temp_dir, VALID_CONFIG))

        assert config.spotify.sp_dc == "dc-cookie"
        assert config.spotify.sp_key == "key-cookie"
        assert config.spotify.user_id == "someuser"
        assert config.session.timeout == 5.0
        assert config.logging.directory is None

    def test_defaults_for_optional_sections(self, temp_dir):
        config = load_config(write_config(temp_dir, """
spotify:
  sp_dc: a
  sp_key: b
  user_id: c
"""))

        assert config.session.timeout == DEFAULT_TIMEOUT
        assert config.logging.directory is None

    def test_log_directory_is_resolved(self, temp_dir):
        content = VALID_CONFIG.replace("directory: null", f"directory: {temp_dir / 'logs'}")

        config = load_config(write_config(temp_dir, content))

        assert config.logging.directory == (temp_dir / "logs").resolve()

    def test_environment_overrides_file(self, temp_dir, monkeypatch):
        monkeypatch.setenv("SPOTIFY_DC", "from-env")

        config = load_config(write_config(temp_dir, VALID_CONFIG))

        assert config.spotify.sp_dc == "from-env"
        assert config.spotify.sp_key == "key-cookie"

    def test_environment_only(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        monkeypatch.setenv("SPOTIFY_DC", "a")
        monkeypatch.setenv("SPOTIFY_KEY", "b")
        monkeypatch.setenv("SPOTIFY_USER_ID", "c")

        config = load_config()

        assert (config.spotify.sp_dc, config.spotify.sp_key, config.spotify.user_id) == ("a", "b", "c")

    def test_explicit_missing_file(self, temp_dir):
        with pytest.raises(ConfigError, match="not found"):
            load_config(temp_dir / "nope.yaml")

    def test_missing_credentials(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)

        with pytest.raises(ConfigError) as exc_info:
            load_config()

        assert exc_info.value.details["field"] == "spotify.sp_dc"

    def test_invalid_yaml(self, temp_dir):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(write_config(temp_dir, "spotify: [unclosed"))

    def test_not_a_mapping(self, temp_dir):
        with pytest.raises(ConfigError, match="dictionary"):
            load_config(write_config(temp_dir, "- a\n- b\n"))

    @pytest.mark.parametrize("timeout", ["0", "-1", "true", "'ten'"])
    def test_invalid_timeout(self, temp_dir, timeout):
        content = VALID_CONFIG.replace("timeout: 5", f"timeout: {timeout}")

        with pytest.raises(ConfigError, match="session.timeout"):
            load_config(write_config(temp_dir, content))

    def test_config_is_frozen(self, temp_dir):
        config = load_config(write_config(temp_dir, VALID_CONFIG))

        with pytest.raises(AttributeError):
            config.spotify.sp_dc = "changed"
