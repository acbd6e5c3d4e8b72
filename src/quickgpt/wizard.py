"""Interactive configuration setup."""

import os
import tempfile
from pathlib import Path

import yaml
from rich import print as rprint
from rich.prompt import Confirm, Prompt

from quickgpt.models.config import Config, LLMConfig, has_open_permissions
from quickgpt.services.chat_client import is_valid_endpoint
from quickgpt.utils.logging import get_logger


logger = get_logger(__name__)


def default_config_path() -> Path:
    return Path.home() / ".config" / "quickgpt" / "config.yaml"


def load_existing_config(config_path: Path) -> Config | None:
    """Load existing config for use as defaults, None if missing or invalid.

    A file with open permissions is still read so its values can be offered
    as defaults; writing it back fixes the mode.
    """
    if not config_path.exists():
        return None

    try:
        return Config.load(config_path)
    except PermissionError as e:
        logger.warning("config_permission_error", config_path=str(config_path), error=str(e))
    except ValueError as e:
        logger.warning("existing_config_unusable", config_path=str(config_path), error=str(e))
        return None

    # Bypass permission check - read values as defaults only
    try:
        config = Config.load(config_path, check_permissions=False)
    except ValueError as e:
        logger.warning("existing_config_unusable", config_path=str(config_path), error=str(e))
        return None

    logger.info("config_loaded_bypassing_permissions", config_path=str(config_path))
    return config


def prompt_endpoint(default: str) -> str:
    """Prompt for the chat-completions endpoint until it is a valid http(s) URL."""
    while True:
        endpoint = Prompt.ask("[bold cyan]API endpoint[/bold cyan]", default=default).strip()
        if is_valid_endpoint(endpoint):
            return endpoint
        rprint("[red]Endpoint must be a full http(s) URL, e.g. https://api.openai.com/v1/chat/completions[/red]")


def prompt_api_key(existing: str) -> str:
    """Prompt for the API key, keeping the existing one on empty input."""
    if existing:
        masked = f"{existing[:4]}...{existing[-4:]}" if len(existing) > 8 else "****"
        api_key = Prompt.ask(
            f"[bold cyan]API key[/bold cyan] (press Enter to keep {masked})",
            password=True,
            default="",
            show_default=False,
        )
        return api_key or existing

    return Prompt.ask("[bold cyan]API key[/bold cyan]", password=True)


def prompt_llm_config(existing: LLMConfig) -> LLMConfig:
    """Ask for every LLM setting, offering existing values as defaults."""
    endpoint = prompt_endpoint(existing.endpoint)
    api_key = prompt_api_key(existing.api_key)
    model = Prompt.ask("[bold cyan]Model[/bold cyan]", default=existing.model)
    system_prompt = Prompt.ask("[bold cyan]System prompt[/bold cyan]", default=existing.system_prompt)

    return LLMConfig(
        endpoint=endpoint,
        api_key=api_key,
        model=model,
        system_prompt=system_prompt,
        probe_url=existing.probe_url,
        verify_ssl=existing.verify_ssl,
    )


def write_config(config: Config, config_path: Path) -> None:
    """Write config to YAML file with mode 600 permissions.

    Args:
        config: Config instance to write
        config_path: Path to write config file

    Raises:
        OSError: If the directory cannot be created or the write fails
    """
    logger.info("write_config_started", config_path=str(config_path))

    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.model_dump(mode="json")

    # Write to temp file first (atomic write)
    temp_fd, temp_path = tempfile.mkstemp(
        dir=config_path.parent,
        prefix=".config_",
        suffix=".yaml"
    )

    try:
        with os.fdopen(temp_fd, "w") as f:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

        os.chmod(temp_path, 0o600)
        os.replace(temp_path, config_path)
        logger.info("config_written_successfully", config_path=str(config_path))

    except Exception as e:
        logger.error("config_write_failed", error=str(e), error_type=type(e).__name__)
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def run_setup_wizard(config_path: Path | None = None) -> bool:
    """Run the interactive setup and write the configuration.

    Args:
        config_path: Target file (defaults to ~/.config/quickgpt/config.yaml)

    Returns:
        True if a config file was written, False if the user aborted
    """
    config_path = config_path or default_config_path()
    existing = load_existing_config(config_path)

    rprint("[bold]quickgpt setup[/bold]\n")

    if existing is None and config_path.exists():
        rprint(f"[yellow]Existing config at {config_path} could not be read; starting from defaults.[/yellow]")

    llm = prompt_llm_config(existing.llm if existing else LLMConfig())
    config = Config(llm=llm)

    if existing is not None and existing == config and not has_open_permissions(config_path):
        rprint("[green]Configuration unchanged.[/green]")
        return False

    if config_path.exists() and not Confirm.ask(f"Overwrite {config_path}?", default=True):
        logger.info("setup_wizard_aborted")
        return False

    write_config(config, config_path)
    rprint(f"[green]Configuration saved to {config_path}[/green]")
    return True
