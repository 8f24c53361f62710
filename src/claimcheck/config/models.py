"""Pydantic models for claimcheck configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class CheckSettings(BaseModel):
    """Defaults applied to every check run."""

    timeout_ms: int | None = Field(default=None, ge=1)  # None = no per-request bound


class FilterSettings(BaseModel):
    """Default service selection. Prefix a term with ':' to exclude it."""

    categories: list[str] = Field(default_factory=list)
    services: list[str] = Field(default_factory=list)


class WebhookConfig(BaseModel):
    """Configuration for a single webhook endpoint."""

    url: str
    events: list[str] = Field(default_factory=lambda: ["report.completed"])
    secret: str = ""  # HMAC signing key, supports ${ENV_VAR}


class ClaimcheckConfig(BaseModel):
    """Root configuration model for .claimcheck.yaml."""

    check: CheckSettings = Field(default_factory=CheckSettings)
    filters: FilterSettings = Field(default_factory=FilterSettings)
    webhooks: list[WebhookConfig] = Field(default_factory=list)
