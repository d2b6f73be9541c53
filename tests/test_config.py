"""Tests for the API key store."""
import json

from recognition import config
from recognition.config import CONFIG_FILE, CredentialStore


def test_missing_file(tmp_path):
    store = CredentialStore(tmp_path / CONFIG_FILE, use_env=False)
    assert store.load_api_key() is None


def test_save_and_load(tmp_path):
    path = tmp_path / CONFIG_FILE
    store = CredentialStore(path, use_env=False)
    store.save_api_key("abc123")

    assert path.read_text(encoding="utf-8") == '{\n    "tmdb_api_key": "abc123"\n}\n'
    assert CredentialStore(path, use_env=False).load_api_key() == "abc123"


def test_save_keeps_other_fields(tmp_path):
    path = tmp_path / CONFIG_FILE
    path.write_text(json.dumps({"other": 1}), encoding="utf-8")

    CredentialStore(path, use_env=False).save_api_key("k")

    assert json.loads(path.read_text(encoding="utf-8")) == {"other": 1, "tmdb_api_key": "k"}


def test_corrupt_file(tmp_path):
    path = tmp_path / CONFIG_FILE
    path.write_text("{not json", encoding="utf-8")

    assert CredentialStore(path, use_env=False).load_api_key() is None


def test_empty_key_is_missing(tmp_path):
    path = tmp_path / CONFIG_FILE
    path.write_text('{"tmdb_api_key": ""}', encoding="utf-8")

    assert CredentialStore(path, use_env=False).load_api_key() is None


def test_environment_wins(tmp_path, monkeypatch):
    path = tmp_path / CONFIG_FILE
    path.write_text('{"tmdb_api_key": "from-file"}', encoding="utf-8")
    monkeypatch.setenv("TMDB_API_KEY", "from-env")

    assert CredentialStore(path).load_api_key() == "from-env"


def test_dotenv_file(tmp_path, monkeypatch):
    monkeypatch.delenv("TMDB_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env").write_text("TMDB_API_KEY=from-dotenv\n", encoding="utf-8")

    try:
        assert config.load_env_api_key() == "from-dotenv"
    finally:
        monkeypatch.delenv("TMDB_API_KEY", raising=False)


def test_default_path_is_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert CredentialStore().config_path == tmp_path / CONFIG_FILE
