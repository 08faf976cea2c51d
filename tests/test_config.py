"""Tests for db.toml loading and profile models."""

import textwrap
from pathlib import Path

import pytest

from db_diff.config.loader import CONFIG_ENV_VAR, default_config_path, load_db_config
from db_diff.config.models import DatabaseConfig, DatabaseProfile

SAMPLE_TOML = textwrap.dedent("""\
    [profiles.staging]
    host = "staging-db.internal"
    user = "reader"
    password = "s3cret"
    name = "app"
    description = "Staging"

    [profiles.production]
    host = "prod-db.internal"
    user = "reader"
    password_env = "PROD_DB_PASSWORD"
    name = "app"
    port = 3307

    [schema]
    connect_timeout = 5
""")


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "db.toml"
    path.write_text(SAMPLE_TOML)
    return path


class TestLoadDbConfig:
    """load_db_config() parses profiles and schema settings."""

    def test_profiles_parsed(self, config_file: Path) -> None:
        config = load_db_config(config_file)

        assert isinstance(config, DatabaseConfig)
        assert list(config.profiles) == ["staging", "production"]
        staging = config.profiles["staging"]
        assert staging.host == "staging-db.internal"
        assert staging.port == 3306
        assert staging.description == "Staging"
        assert config.profiles["production"].port == 3307

    def test_schema_settings(self, config_file: Path) -> None:
        config = load_db_config(config_file)

        assert config.connect_timeout == 5

    def test_schema_settings_default(self, tmp_path: Path) -> None:
        path = tmp_path / "db.toml"
        path.write_text('[profiles.a]\nhost = "h"\nuser = "u"\nname = "d"\n')

        config = load_db_config(path)

        assert config.connect_timeout == 10

    def test_accepts_str_path(self, config_file: Path) -> None:
        assert "staging" in load_db_config(str(config_file)).profiles

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Database config not found"):
            load_db_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "db.toml"
        path.write_text("[profiles.a\n")

        with pytest.raises(ValueError, match="Invalid TOML"):
            load_db_config(path)

    def test_profile_missing_required_field(self, tmp_path: Path) -> None:
        path = tmp_path / "db.toml"
        path.write_text('[profiles.a]\nhost = "h"\n')

        with pytest.raises(ValueError, match="Invalid database config"):
            load_db_config(path)


class TestDefaultConfigPath:
    """DB_DIFF_CONFIG overrides ./db.toml."""

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch, config_file: Path) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

        assert default_config_path() == config_file
        assert "production" in load_db_config().profiles

    def test_cwd_default(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)

        assert default_config_path() == tmp_path / "db.toml"


class TestResolvePassword:
    """DatabaseProfile.resolve_password()."""

    def test_explicit_password(self) -> None:
        profile = DatabaseProfile(host="h", user="u", name="d", password="pw")
        assert profile.resolve_password() == "pw"

    def test_explicit_wins_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PW", "from-env")
        profile = DatabaseProfile(host="h", user="u", name="d", password="pw", password_env="DB_PW")
        assert profile.resolve_password() == "pw"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PW", "from-env")
        profile = DatabaseProfile(host="h", user="u", name="d", password_env="DB_PW")
        assert profile.resolve_password() == "from-env"

    def test_env_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DB_PW", raising=False)
        profile = DatabaseProfile(host="h", user="u", name="d", password_env="DB_PW")
        with pytest.raises(KeyError, match="DB_PW"):
            profile.resolve_password()

    def test_no_password(self) -> None:
        profile = DatabaseProfile(host="h", user="u", name="d")
        assert profile.resolve_password() == ""
