"""
Configuration management for docsheet.

Handles API key storage and the optional AI extraction settings.
Nothing here is required: without a key the parser runs heuristically.
"""

import getpass
import json
import os
from pathlib import Path
from typing import Optional

from src.llm.gateway import DEFAULT_MODEL

APP_NAME = "docsheet"
AI_TOGGLE_ENV = "DOCSHEET_AI_EXTRACTION"


def get_config_dir() -> Path:
    """Get the configuration directory, creating it if needed."""
    # Use XDG_CONFIG_HOME if set, otherwise ~/.config
    config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    config_dir = Path(config_home) / APP_NAME
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> dict:
    """Load configuration from disk."""
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path) as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            return {}
    return {}


def save_config(config: dict) -> None:
    """Save configuration to disk."""
    config_path = get_config_path()
    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)
    # Secure the file (owner read/write only)
    os.chmod(config_path, 0o600)


def get_api_key() -> Optional[str]:
    """
    Get the Anthropic API key from config or environment.

    Priority:
    1. ANTHROPIC_API_KEY environment variable
    2. Stored config file
    """
    env_key = os.environ.get("ANTHROPIC_API_KEY")
    if env_key:
        return env_key
    return load_config().get("anthropic_api_key")


def set_api_key(api_key: str) -> None:
    """Store the API key in config."""
    config = load_config()
    config["anthropic_api_key"] = api_key
    save_config(config)


def clear_api_key() -> None:
    """Remove the stored API key."""
    config = load_config()
    config.pop("anthropic_api_key", None)
    save_config(config)


def get_model() -> str:
    """Model used for AI extraction."""
    return load_config().get("model") or DEFAULT_MODEL


def is_ai_enabled() -> bool:
    """Whether AI extraction should be attempted before heuristic parsing.

    The DOCSHEET_AI_EXTRACTION environment variable ("0"/"false"/"off")
    overrides the stored "ai_extraction" setting.
    """
    env_value = os.environ.get(AI_TOGGLE_ENV)
    if env_value is not None:
        return env_value.strip().lower() not in ("0", "false", "no", "off")
    return bool(load_config().get("ai_extraction", True))


def interactive_login() -> bool:
    """
    Prompt for an API key and store it.

    Returns:
        True if a key was saved, False otherwise
    """
    existing_key = get_api_key()
    if existing_key:
        print(f"  API key already set: {existing_key[:8]}...{existing_key[-4:]}")
        response = input("  Replace existing key? [y/N] ").strip().lower()
        if response != "y":
            print("  Keeping existing key.")
            return True

    print("  AI extraction needs an Anthropic API key.")
    print("  Get one at: https://console.anthropic.com/settings/keys")

    try:
        api_key = getpass.getpass("  Enter your API key: ").strip()
    except (KeyboardInterrupt, EOFError):
        print("\n  Cancelled.")
        return False

    if not api_key:
        print("  No key entered.")
        return False

    if not api_key.startswith("sk-ant-"):
        print("  Warning: Key doesn't look like an Anthropic key (should start with 'sk-ant-')")

    set_api_key(api_key)
    print(f"  Key saved to: {get_config_path()}")
    return True
