"""claimcheck configuration system."""

from claimcheck.config.loader import (
    CONFIG_ENV,
    CONFIG_FILENAME,
    find_config_file,
    load_config,
    load_config_or_default,
    unknown_filter_terms,
)
from claimcheck.config.models import CheckSettings, ClaimcheckConfig, FilterSettings, WebhookConfig

__all__ = [
    "CONFIG_ENV",
    "CONFIG_FILENAME",
    "CheckSettings",
    "ClaimcheckConfig",
    "FilterSettings",
    "WebhookConfig",
    "find_config_file",
    "load_config",
    "load_config_or_default",
    "unknown_filter_terms",
]
