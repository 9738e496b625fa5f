"""
Config Loader — Load mirror settings from a file and the environment.

Supports:
1. A config file: config.json (original format) or config.yaml / config.yml
2. SHADOW_* environment variables, which override file values

## Usage

    from shadow_activity.config.loader import load_settings

    settings = load_settings()             # $SHADOW_CONFIG or ./config.json
    settings = load_settings("mirror.yaml")

Every problem (missing file, bad syntax, invalid field) is raised as
ConfigInvalid before any repository is touched.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from ..errors import ConfigInvalid
from .models import MirrorSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.json"
CONFIG_PATH_ENV_VAR = "SHADOW_CONFIG"

# Environment variable → field name
ENV_OVERRIDES = {
    "SHADOW_REPO_PATH_SOURCE": "repo_path_source",
    "SHADOW_REPO_PATH_TARGET": "repo_path_target",
    "SHADOW_BRANCH_NAME": "branch_name",
    "SHADOW_COMMIT_AUTHOR_EMAILS_SOURCE": "commit_author_emails_source",
    "SHADOW_COMMIT_AUTHOR_NAME_TARGET": "commit_author_name_target",
    "SHADOW_COMMIT_AUTHOR_EMAIL_TARGET": "commit_author_email_target",
    "SHADOW_ARTIFACT_NAME": "artifact_name",
}

_LIST_FIELDS = {"commit_author_emails_source"}


def resolve_config_path(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Explicit path, then $SHADOW_CONFIG, then ./config.json."""
    if path:
        return Path(path)
    env = os.environ if environ is None else environ
    return Path(env.get(CONFIG_PATH_ENV_VAR) or DEFAULT_CONFIG_FILE)


def read_config_file(path: Path) -> Dict[str, Any]:
    """Parse a JSON or YAML config file into a dict."""
    if not path.is_file():
        raise ConfigInvalid(f"Missing config file: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigInvalid(f"Cannot parse config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigInvalid(f"Config file {path} must contain a mapping at the top level")
    return data


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Map camelCase aliases onto field names so overrides can replace them."""
    alias_to_name = {
        info.alias: name
        for name, info in MirrorSettings.model_fields.items()
        if info.alias
    }
    return {alias_to_name.get(key, key): value for key, value in data.items()}


def apply_env_overrides(
    data: Dict[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Overlay SHADOW_* environment variables onto file values."""
    env = os.environ if environ is None else environ
    merged = dict(data)
    for var, field_name in ENV_OVERRIDES.items():
        value = env.get(var)
        if value is None or value == "":
            continue
        if field_name in _LIST_FIELDS:
            merged[field_name] = [item.strip() for item in value.split(",") if item.strip()]
        else:
            merged[field_name] = value
        logger.debug(f"Config override from {var}")
    return merged


def build_settings(data: Mapping[str, Any]) -> MirrorSettings:
    """Validate raw config data, translating pydantic errors to ConfigInvalid."""
    try:
        return MirrorSettings.model_validate(dict(data))
    except ValidationError as e:
        fields = []
        problems = []
        for error in e.errors():
            field_name = ".".join(str(part) for part in error["loc"]) or "config"
            fields.append(field_name)
            problems.append(f"{field_name}: {error['msg']}")
        raise ConfigInvalid(
            "Invalid configuration:\n  " + "\n  ".join(problems),
            fields=fields,
        ) from e


def load_settings(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> MirrorSettings:
    """
    Load and validate mirror settings.

    Args:
        path: Config file path (default: $SHADOW_CONFIG or ./config.json)
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated MirrorSettings

    Raises:
        ConfigInvalid: If the file is missing, unparseable or invalid
    """
    config_path = resolve_config_path(path, environ)
    logger.debug(f"Loading config from {config_path}")

    data = _normalize_keys(read_config_file(config_path))
    data = apply_env_overrides(data, environ)

    settings = build_settings(data)
    logger.debug(
        f"Config loaded: source={settings.repo_path_source}, "
        f"target={settings.repo_path_target}, branch={settings.branch_name}"
    )
    return settings
