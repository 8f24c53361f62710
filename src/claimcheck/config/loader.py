"""Locate, parse and validate .claimcheck.yaml."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from claimcheck.config.models import ClaimcheckConfig, FilterSettings
from claimcheck.errors import ConfigError, ConfigSyntaxError
from claimcheck.registry.filters import sanitize
from claimcheck.services.base import ServiceDescriptor

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".claimcheck.yaml"
CONFIG_ENV = "CLAIMCHECK_CONFIG"

_ENV_REF = re.compile(r"\$\{(?P<var>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<default>[^}]*))?\}")


def expand_env(value: Any, path: Path | None = None) -> Any:
    """Substitute ``${VAR}`` and ``${VAR:-default}`` in every string of a parsed document.

    The default applies when the variable is unset or empty. A reference with
    no default to an unset variable raises ``ConfigError``, so a webhook URL or
    secret never silently ends up as the literal ``${...}`` text.
    """
    if isinstance(value, dict):
        return {k: expand_env(v, path) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env(v, path) for v in value]
    if not isinstance(value, str):
        return value

    def _resolve(match: re.Match[str]) -> str:
        var, default = match.group("var"), match.group("default")
        resolved = os.environ.get(var)
        if not resolved and default is not None:
            return default
        if resolved is None:
            raise ConfigError(
                f"Environment variable {var} is not set (referenced in {path or CONFIG_FILENAME})",
                path,
            )
        return resolved

    return _ENV_REF.sub(_resolve, value)


def _coerce_timeout(data: dict[str, Any], path: Path) -> None:
    """Accept ``timeout_ms`` as text, which is what env interpolation produces.

    ``"2500"`` and ``"2500ms"`` become 2500. Blank text or ``none`` means no bound.
    """
    check = data.get("check")
    if not isinstance(check, dict) or not isinstance(check.get("timeout_ms"), str):
        return
    raw = check["timeout_ms"]
    text = raw.strip().lower().removesuffix("ms").strip()
    if text in ("", "none"):
        check["timeout_ms"] = None
    elif text.isdigit():
        check["timeout_ms"] = int(text)
    else:
        raise ConfigError(
            f"Invalid configuration in {path}: check.timeout_ms must be a whole number "
            f"of milliseconds, got {raw!r}",
            path,
        )


def _read_document(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigSyntaxError(f"Invalid YAML in {path}: {exc}", path) from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Invalid configuration in {path}: expected a mapping at the top level, "
            f"got {type(raw).__name__}",
            path,
        )
    return raw


def find_config_file(start: Path | None = None) -> Path | None:
    """Return $CLAIMCHECK_CONFIG if set, else the nearest .claimcheck.yaml at or above *start*."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    current = (start or Path.cwd()).resolve()
    return next(
        (d / CONFIG_FILENAME for d in (current, *current.parents) if (d / CONFIG_FILENAME).is_file()),
        None,
    )


def load_config(path: Path | None = None) -> ClaimcheckConfig:
    """Load *path* (or the discovered file) into a ``ClaimcheckConfig``.

    Raises ``FileNotFoundError`` when there is no file, ``ConfigSyntaxError``
    for malformed YAML and ``ConfigError`` for anything that does not validate.
    Both config errors are ``ValueError`` subclasses.
    """
    config_path = path or find_config_file()
    if not config_path or not config_path.is_file():
        raise FileNotFoundError(
            f"Could not find {config_path or CONFIG_FILENAME}. Create one or specify a path."
        )

    logger.debug("Loading configuration from %s", config_path)
    data = expand_env(_read_document(config_path), config_path)
    _coerce_timeout(data, config_path)
    try:
        return ClaimcheckConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {config_path}: {exc}", config_path) from exc


def load_config_or_default(path: Path | None = None) -> ClaimcheckConfig:
    """Like load_config, but fall back to defaults when no file is found.

    An explicit *path* that does not exist is still an error.
    """
    if path is None and find_config_file() is None:
        logger.debug("No %s found, using defaults", CONFIG_FILENAME)
        return ClaimcheckConfig()
    return load_config(path)


def unknown_filter_terms(
    filters: FilterSettings,
    descriptors: Iterable[ServiceDescriptor],
) -> list[str]:
    """Describe configured filter terms that match no known category or service.

    Such terms are legal but select nothing (or exclude nothing).
    """
    descriptors = list(descriptors)
    categories = {sanitize(d.category) for d in descriptors}
    titles = {sanitize(d.title) for d in descriptors}

    problems = [
        f"Filter category '{term}' matches no category"
        for term in filters.categories
        if term.strip() and sanitize(term) not in categories
    ]
    problems += [
        f"Filter service '{term}' matches no service"
        for term in filters.services
        if term.strip() and sanitize(term) not in titles
    ]
    return problems
