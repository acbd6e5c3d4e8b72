"""Configuration models for quickgpt."""

from pydantic import BaseModel, Field
from pathlib import Path
import yaml
import os
import stat


DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4"
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant responding to queries from a menu bar app."
DEFAULT_PROBE_URL = "https://www.apple.com"


def has_open_permissions(path: Path) -> bool:
    """True if the file is readable, writable or executable by group or others."""
    return bool(os.stat(path).st_mode & (stat.S_IRWXG | stat.S_IRWXO))


class ChatRequestConfig(BaseModel):
    """
    Per-call settings for a chat-completion request.

    Built once by the caller and passed by value into ChatClient.complete().
    The endpoint is a plain string: a malformed URL is reported as an
    outcome by the client, not rejected here.
    """

    endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        description="Full chat-completions URL"
    )

    api_key: str = Field(
        default="",
        repr=False,
        description="Bearer token for the API (may be empty, reported at call time)"
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Model identifier (e.g., 'gpt-4', 'gpt-4o')"
    )

    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        description="System message sent ahead of the user prompt"
    )

    temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    timeout: float = Field(
        default=45.0,
        gt=0,
        description="Request timeout in seconds"
    )

    max_retries: int = Field(
        default=2,
        ge=0,
        description="Additional attempts after a transport failure"
    )

    probe_url: str = Field(
        default=DEFAULT_PROBE_URL,
        description="Host probed before sending to detect missing connectivity"
    )

    probe_timeout: float = Field(default=5.0, gt=0)

    verify_ssl: bool = Field(
        default=True,
        description="Verify TLS certificates (disable for self-signed local servers)"
    )

    model_config = {"frozen": True}


class LLMConfig(BaseModel):
    """Configuration for the chat-completion API connection."""

    endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        description="Chat-completions endpoint URL (OpenAI compatible)"
    )

    api_key: str = Field(
        default="",
        repr=False,
        description="API key for authentication"
    )

    model: str = Field(
        default=DEFAULT_MODEL,
        description="Model identifier"
    )

    system_prompt: str = Field(
        default=DEFAULT_SYSTEM_PROMPT,
        description="System prompt sent with every request"
    )

    probe_url: str = Field(
        default=DEFAULT_PROBE_URL,
        description="URL used for the connectivity check"
    )

    verify_ssl: bool = Field(default=True)

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for quickgpt."""

    llm: LLMConfig = Field(default_factory=LLMConfig, description="Chat API settings")

    def to_request_config(self, model: str | None = None) -> ChatRequestConfig:
        """
        Build the per-call request config from the loaded settings.

        Args:
            model: Optional model override for this call

        Returns:
            ChatRequestConfig carrying the connection settings
        """
        return ChatRequestConfig(
            endpoint=self.llm.endpoint,
            api_key=self.llm.api_key,
            model=model or self.llm.model,
            system_prompt=self.llm.system_prompt,
            probe_url=self.llm.probe_url,
            verify_ssl=self.llm.verify_ssl,
        )

    @classmethod
    def load(cls, path: Path, check_permissions: bool = True) -> "Config":
        """
        Load configuration from YAML file.

        Validates file permissions before loading.
        Raises PermissionError if file is group/world readable.

        Args:
            path: Path to config.yaml file
            check_permissions: Skip the mode-600 check when False (the setup
                wizard reads a permissive file only to offer its values)

        Returns:
            Validated Config instance

        Raises:
            PermissionError: If file permissions are too open
            FileNotFoundError: If config file doesn't exist
            ValueError: If YAML is invalid, not a mapping, or validation fails
        """
        if not path.exists():
            raise FileNotFoundError(
                f"Configuration file not found at {path}\n\n"
                f"Run 'quickgpt init' or create the file with the following format:\n\n"
                f"llm:\n"
                f"  endpoint: {DEFAULT_ENDPOINT}\n"
                f"  api_key: YOUR_API_KEY_HERE\n"
                f"  model: {DEFAULT_MODEL}\n"
                f"  system_prompt: {DEFAULT_SYSTEM_PROMPT}\n"
            )

        # Check file permissions (must be 600)
        if check_permissions and has_open_permissions(path):
            raise PermissionError(
                f"Config file has overly permissive permissions: {oct(os.stat(path).st_mode)}\n"
                f"Run: chmod 600 {path}"
            )

        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid config in {path}: expected a mapping at the top level, "
                f"got {type(data).__name__}"
            )

        return cls(**data)

    model_config = {"frozen": True}
