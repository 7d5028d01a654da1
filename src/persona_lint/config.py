import os
import copy
from pathlib import Path
from typing import Dict, Any, cast, Union
from .constants import DEFAULT_PLACEHOLDERS, DEFAULT_TOKEN_BUDGET
from .types import Settings

# Handle TOML parsing for Python 3.11+ (tomllib) and older (tomli)
tomllib: Any = None
try:
    import tomllib as _tomllib  # type: ignore

    tomllib = _tomllib
except ImportError:
    try:
        import tomli as _tomli

        tomllib = _tomli
    except ImportError:
        tomllib = None


DEFAULT_CONFIG: Settings = {
    "verbosity": "summary",
    "repo_url": None,
    "branch": "master",
    "token_budget": DEFAULT_TOKEN_BUDGET,
    "ignore": [],
    "placeholders": list(DEFAULT_PLACEHOLDERS),
    "docs_dirs": ["docs"],
    "directories": {},
    "strict": False,
}

VERBOSITY_LEVELS = ["quiet", "summary", "detailed"]


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge user settings into the default configuration."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and key in result and isinstance(result[key], dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _normalize(settings: Dict[str, Any]) -> Dict[str, Any]:
    """Drops values the rest of the tool cannot act on."""
    if settings.get("verbosity") not in VERBOSITY_LEVELS:
        settings["verbosity"] = DEFAULT_CONFIG["verbosity"]
    repo_url = settings.get("repo_url")
    if repo_url:
        settings["repo_url"] = str(repo_url).rstrip("/")
    try:
        settings["token_budget"] = int(settings.get("token_budget", DEFAULT_TOKEN_BUDGET))
    except (TypeError, ValueError):
        settings["token_budget"] = DEFAULT_TOKEN_BUDGET
    for key in ("ignore", "placeholders", "docs_dirs"):
        if not isinstance(settings.get(key), list):
            settings[key] = copy.deepcopy(DEFAULT_CONFIG[key])  # type: ignore[literal-required]
    return settings


def load_config(path: Union[str, Path] = ".") -> Settings:
    """
    Loads configuration from pyproject.toml and merges it with DEFAULT_CONFIG.
    Looks for the [tool.persona-lint] section in accordance with PEP 518.
    """
    if os.path.isfile(path):
        search_dir = os.path.dirname(os.path.abspath(str(path)))
    else:
        search_dir = str(path)

    config_path = os.path.join(search_dir, "pyproject.toml")
    user_config: Dict[str, Any] = {}

    if tomllib and os.path.exists(config_path):
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            user_config = data.get("tool", {}).get("persona-lint", {})
        except (OSError, tomllib.TOMLDecodeError):
            # Malformed or unreadable pyproject.toml falls back to defaults
            user_config = {}

    merged = _deep_merge(cast(Dict[str, Any], DEFAULT_CONFIG), user_config)
    return cast(Settings, _normalize(merged))
