"""
Configuration models for armforge.

Provides type-safe configuration using pydantic with validation,
defaults, and schema enforcement.
"""

from enum import Enum
from pathlib import Path
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LogLevel(str, Enum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class NamingSettings(BaseModel):
    """Settings for generated resource names."""

    separator: str = Field(
        default="-",
        description="Separator placed between name components",
    )
    hash_length: Annotated[int, Field(ge=4, le=16)] = Field(
        default=6,
        description="Hex characters appended to globally unique names",
    )
    prefix_overrides: Dict[str, str] = Field(
        default_factory=dict,
        description="Resource kind -> prefix replacing the built-in one",
    )
    max_length_overrides: Dict[str, Annotated[int, Field(gt=0)]] = Field(
        default_factory=dict,
        description="Resource kind -> maximum length tighter than the provider limit",
    )

    model_config = ConfigDict(extra="forbid")  # Reject unknown fields

    @field_validator("separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        """Only separators Azure accepts in most names are allowed."""
        if v not in ("-", "_", ""):
            raise ValueError("separator must be '-', '_' or empty")
        return v

    @field_validator("prefix_overrides")
    @classmethod
    def validate_prefixes(cls, v: Dict[str, str]) -> Dict[str, str]:
        for kind, prefix in v.items():
            if not prefix or not prefix.isalnum():
                raise ValueError(
                    f"prefix override for '{kind}' must be non-empty alphanumeric"
                )
        return v


class ValidationSettings(BaseModel):
    """Settings for template validation during synthesis."""

    enabled: bool = Field(
        default=True,
        description="Run the validation pipeline on every synthesized template",
    )
    strict: bool = Field(
        default=False,
        description="Treat warnings as errors",
    )
    disabled_validators: List[str] = Field(
        default_factory=list,
        description="Validator names to skip (e.g. 'limits')",
    )

    model_config = ConfigDict(extra="forbid")


class OutputSettings(BaseModel):
    """Settings for writing a cloud assembly to disk."""

    outdir: Path = Field(
        default=Path("arm.out"),
        description="Directory receiving one template per stack plus manifest.json",
    )
    pretty_print: bool = Field(
        default=True,
        description="Indent JSON output",
    )
    indent: Annotated[int, Field(ge=0, le=8)] = Field(
        default=2,
        description="Indentation used when pretty printing",
    )

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Minimum log level",
    )
    json_output: bool = Field(
        default=False,
        description="Render structured logs as JSON instead of console output",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v


class ArmForgeConfig(BaseModel):
    """
    Root configuration for armforge.

    This is the top-level configuration object that contains all
    settings for naming, validation, output and logging.
    """

    naming: NamingSettings = Field(
        default_factory=NamingSettings,
        description="Resource naming settings",
    )
    validation: ValidationSettings = Field(
        default_factory=ValidationSettings,
        description="Template validation settings",
    )
    output: OutputSettings = Field(
        default_factory=OutputSettings,
        description="Assembly output settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging settings",
    )
    default_tags: Dict[str, str] = Field(
        default_factory=dict,
        description="Tags applied to every stack below the App",
    )
    subscription_id: Optional[str] = Field(
        default=None,
        description="Subscription id recorded in the assembly manifest",
    )

    model_config = ConfigDict(extra="forbid")
