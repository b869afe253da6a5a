"""Configuration models for xpiport."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON lines instead of text")
    filename: str | None = Field(default=None, description="Log file (stdout if None)")


class ConversionConfig(BaseModel):
    """Defaults for conversion runs.

    Every field can be overridden from the command line.
    """

    model_config = ConfigDict(extra="forbid")

    profile: str = Field(default="seamonkey", description="Target application profile name")

    max_version: str = Field(
        default="2.*",
        min_length=1,
        description="maxVersion declared for the target application",
    )

    output_dir: str = Field(default="converted", description="Directory for converted packages")

    filename_suffix: str = Field(
        default="", description="Inserted between stem and extension of output files"
    )

    pretty_xml: bool = Field(default=True, description="Re-indent install.rdf when rewriting it")


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    logging: LoggingConfig = LoggingConfig()
    conversion: ConversionConfig = ConversionConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("xpiport.yaml")
