import pytest
from testgen.config import Config, DEFAULT_ACCEPTANCE_CRITERIA_FIELD, DEFAULT_APP_ID


def write_config(tmp_path, content):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(content)
    return str(config_file)


class TestConfig:

    def test_env_substitution_with_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.delenv("GEMINI_MODEL", raising=False)
        path = write_config(tmp_path, (
            "llm:\n"
            "  google_api_key: ${GEMINI_API_KEY}\n"
            "  google_model: ${GEMINI_MODEL:gemini-1.5-pro}\n"
            "  timeout: 45\n"
        ))

        llm_config = Config(path).get_llm_config()

        assert llm_config['api_key'] == "env-key"
        assert llm_config['model'] == "gemini-1.5-pro"
        assert llm_config['timeout'] == 45.0
        assert llm_config['base_url'] == "https://generativelanguage.googleapis.com/v1beta"

    def test_unset_api_key_is_none(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        path = write_config(tmp_path, "llm:\n  google_api_key: ${GEMINI_API_KEY}\n")

        config = Config(path)

        assert config.get_llm_config()['api_key'] is None
        assert config.validate() is False

    def test_defaults_for_empty_file(self, tmp_path):
        config = Config(write_config(tmp_path, ""))

        assert config.get_acceptance_criteria_field() == DEFAULT_ACCEPTANCE_CRITERIA_FIELD
        assert config.get_app_id() == DEFAULT_APP_ID
        assert config.get_proxy_url() == "http://localhost:3001"
        assert config.get_jira_timeout() == 30.0
        assert config.get_default_user_id() == "local-user"

    def test_invalid_timeout_falls_back(self, tmp_path):
        config = Config(write_config(tmp_path, "llm:\n  timeout: soon\n"))

        assert config.get_llm_config()['timeout'] == 60.0

    def test_cors_origins_string_or_list(self, tmp_path):
        config = Config(write_config(tmp_path, "server:\n  cors_origins: 'http://a, http://b'\n"))
        assert config.get_cors_origins() == ["http://a", "http://b"]

        config = Config(write_config(tmp_path, "server:\n  cors_origins:\n    - http://c\n"))
        assert config.get_cors_origins() == ["http://c"]

    def test_validate_rejects_bad_port(self, tmp_path):
        path = write_config(tmp_path, "server:\n  port: 70000\nllm:\n  google_api_key: k\n")

        assert Config(path).validate() is False

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config(str(tmp_path / "missing.yaml"))
