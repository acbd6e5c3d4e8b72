"""Unit tests for configuration models."""

import os
import stat

import pytest

from quickgpt.models.config import ChatRequestConfig, Config, LLMConfig


class TestChatRequestConfig:
    """Test per-call request configuration."""

    def test_defaults(self):
        config = ChatRequestConfig()

        assert config.endpoint == "https://api.openai.com/v1/chat/completions"
        assert config.api_key == ""
        assert config.model == "gpt-4"
        assert config.temperature == 0.7
        assert config.timeout == 45.0
        assert config.max_retries == 2
        assert config.probe_timeout == 5.0

    def test_malformed_endpoint_is_accepted(self):
        """Test endpoint validation is deferred to the client."""
        config = ChatRequestConfig(endpoint="not a url")

        assert config.endpoint == "not a url"

    def test_immutable(self):
        config = ChatRequestConfig(api_key="sk-test")

        with pytest.raises(Exception):  # Pydantic ValidationError
            config.api_key = "new-key"

    def test_api_key_hidden_from_repr(self):
        config = ChatRequestConfig(api_key="sk-secret")

        assert "sk-secret" not in repr(config)

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError):
            ChatRequestConfig(max_retries=-1)


class TestConfig:
    """Test root configuration."""

    def test_to_request_config(self):
        config = Config(llm=LLMConfig(
            endpoint="http://localhost:11434/v1/chat/completions",
            api_key="ollama",
            model="llama3",
            system_prompt="Be terse",
        ))

        request_config = config.to_request_config()

        assert request_config.endpoint == "http://localhost:11434/v1/chat/completions"
        assert request_config.api_key == "ollama"
        assert request_config.model == "llama3"
        assert request_config.system_prompt == "Be terse"
        assert request_config.timeout == 45.0

    def test_to_request_config_model_override(self):
        config = Config(llm=LLMConfig(api_key="k", model="gpt-4"))

        assert config.to_request_config(model="gpt-4o").model == "gpt-4o"

    def test_load_valid_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "llm:\n"
            "  endpoint: https://api.test.com/v1/chat/completions\n"
            "  api_key: sk-test-key\n"
            "  model: gpt-4o\n"
        )
        os.chmod(config_file, stat.S_IRUSR | stat.S_IWUSR)

        config = Config.load(config_file)

        assert config.llm.api_key == "sk-test-key"
        assert config.llm.model == "gpt-4o"
        assert config.llm.system_prompt.startswith("You are a helpful assistant")

    def test_load_empty_file_uses_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        os.chmod(config_file, 0o600)

        config = Config.load(config_file)

        assert config.llm == LLMConfig()

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="quickgpt init"):
            Config.load(tmp_path / "missing.yaml")

    def test_load_rejects_group_readable_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("llm:\n  api_key: sk-test\n")
        os.chmod(config_file, 0o640)

        with pytest.raises(PermissionError, match="chmod 600"):
            Config.load(config_file)

    def test_load_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("llm: [unclosed\n")
        os.chmod(config_file, 0o600)

        with pytest.raises(ValueError, match="Invalid YAML"):
            Config.load(config_file)

    def test_load_invalid_field_type(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("llm:\n  verify_ssl: maybe-not\n")
        os.chmod(config_file, 0o600)

        with pytest.raises(ValueError):
            Config.load(config_file)

    def test_load_non_mapping_yaml(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- endpoint\n- api_key\n")
        os.chmod(config_file, 0o600)

        with pytest.raises(ValueError, match="expected a mapping"):
            Config.load(config_file)

    def test_load_without_permission_check(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("llm:\n  api_key: sk-test\n")
        os.chmod(config_file, 0o644)

        config = Config.load(config_file, check_permissions=False)

        assert config.llm.api_key == "sk-test"
