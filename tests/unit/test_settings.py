import os
import pytest
from pydantic import ValidationError
from svcat.config import CatalogSettings, CriticalityMode

ENV_VARS = (
    "SVCAT_CONFIG_DIR",
    "SVCAT_LOG_LEVEL",
    "SVCAT_CRITICALITY",
    "SVCAT_STRICT_CYCLES",
    "SVCAT_SCHEMA_VERSION",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    # An empty .env keeps load_dotenv from searching parent directories.
    dotenv = tmp_path / ".env"
    dotenv.write_text("")
    return str(dotenv)


def test_defaults(clean_env):
    settings = CatalogSettings.from_env(clean_env)
    assert settings.config_dir == "./config"
    assert settings.log_level == "WARNING"
    assert settings.criticality == CriticalityMode.TRANSITIVE
    assert settings.strict_cycles is False
    assert settings.schema_version == "1.0.0"


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("SVCAT_CONFIG_DIR", "/srv/catalog")
    monkeypatch.setenv("SVCAT_CRITICALITY", "LOCAL")
    monkeypatch.setenv("SVCAT_STRICT_CYCLES", "yes")
    monkeypatch.setenv("SVCAT_SCHEMA_VERSION", "1.2.0")
    settings = CatalogSettings.from_env(clean_env)
    assert settings.config_dir == "/srv/catalog"
    assert settings.criticality == CriticalityMode.LOCAL
    assert settings.strict_cycles is True
    assert settings.schema_version == "1.2.0"


def test_empty_values_are_ignored(clean_env, monkeypatch):
    monkeypatch.setenv("SVCAT_LOG_LEVEL", "")
    assert CatalogSettings.from_env(clean_env).log_level == "WARNING"


def test_dotenv_file(tmp_path, clean_env):
    dotenv = tmp_path / "catalog.env"
    dotenv.write_text("SVCAT_LOG_LEVEL=DEBUG\nSVCAT_STRICT_CYCLES=false\n")
    try:
        settings = CatalogSettings.from_env(str(dotenv))
    finally:
        os.environ.pop("SVCAT_LOG_LEVEL", None)
        os.environ.pop("SVCAT_STRICT_CYCLES", None)
    assert settings.log_level == "DEBUG"
    assert settings.strict_cycles is False


def test_invalid_criticality(clean_env, monkeypatch):
    monkeypatch.setenv("SVCAT_CRITICALITY", "sometimes")
    with pytest.raises(ValidationError):
        CatalogSettings.from_env(clean_env)
