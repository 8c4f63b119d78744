"""Configuration schema using Pydantic.

Deployment settings for fault reporting and library logging. Values come from
``~/.jsonwire/config.json`` (camelCase keys) and ``JSONWIRE_*`` environment
variables, e.g. ``JSONWIRE_FAULTS__INCLUDE_EXCEPTION_DETAIL_IN_FAULTS=true``.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FaultsConfig(BaseModel):
    """Fault response settings."""
    include_exception_detail_in_faults: bool = False  # Stack traces and inner causes on the wire
    default_status: int = Field(default=500, ge=400, le=599)  # Status for faults without a declared code
    max_depth: int = Field(default=64, ge=1)  # Longest cause chain rendered
    redact_messages: bool = False  # Scrub tokens/keys from fault messages


class LoggingConfig(BaseModel):
    """Library log output."""
    enabled: bool = True
    level: str = "INFO"


class Config(BaseSettings):
    """Root configuration for jsonwire."""
    model_config = SettingsConfigDict(env_prefix="JSONWIRE_", env_nested_delimiter="__")

    faults: FaultsConfig = Field(default_factory=FaultsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
