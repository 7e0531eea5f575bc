"""Unit tests for API key storage."""

import os
from unittest.mock import patch

import pytest
from keyring.errors import NoKeyringError
from sadaam_editor.utils import env


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # setenv first so teardown restores whatever load/save wrote
    for name in ("GEMINI_API_KEY", "API_KEY"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


class TestLoadApiKey:

    def test_environment_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("GEMINI_API_KEY", " from-env ")
        assert env.load_api_key(tmp_path / ".env") == "from-env"

    def test_keyring_before_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text('GEMINI_API_KEY="from-file"\n')

        with patch.object(env, "retrieve_key_secure", return_value="from-keyring"):
            assert env.load_api_key(env_file) == "from-keyring"

    def test_file_fallback(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text('GEMINI_API_KEY="from-file"\n')

        with patch.object(env, "retrieve_key_secure", return_value=None):
            assert env.load_api_key(env_file) == "from-file"
        assert os.environ["GEMINI_API_KEY"] == "from-file"

    def test_placeholder_ignored(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("API_KEY=your_key_here\n")
        with patch.object(env, "retrieve_key_secure", return_value=None):
            assert env.load_api_key(env_file) is None


class TestSaveApiKey:

    def test_empty_key_rejected(self, tmp_path):
        with pytest.raises(ValueError):
            env.save_api_key("  ", tmp_path / ".env")

    def test_keyring_used_when_available(self, tmp_path):
        env_file = tmp_path / ".env"
        with patch.object(env.keyring, "set_password") as set_password:
            env.save_api_key("secret", env_file)

        set_password.assert_called_once_with(env.SERVICE_NAME, env.KEYRING_USERNAME, "secret")
        assert not env_file.exists()
        assert os.environ["GEMINI_API_KEY"] == "secret"

    def test_falls_back_to_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("OTHER=1\nGEMINI_API_KEY=old\n")

        with patch.object(env.keyring, "set_password", side_effect=NoKeyringError()):
            env.save_api_key("new-key", env_file)

        lines = env_file.read_text().splitlines()
        assert lines == ["OTHER=1", "GEMINI_API_KEY=new-key"]
