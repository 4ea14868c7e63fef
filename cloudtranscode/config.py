"""
Configuration management for CloudTranscode
"""

import yaml
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BitmovinConfig(BaseModel):
    api_key: str = ""
    endpoint: str = "https://api.bitmovin.com/v1/"
    timeout: float = 5.0  # Seconds, applied to every vendor request
    access_key_id: str = ""
    secret_access_key: str = ""
    destination: str = ""  # e.g., "s3://some-output-bucket/some/prefix/"
    encoding_region: str = "AWS_US_EAST_1"
    aws_storage_region: str = "US_EAST_1"
    auto_start_manifest: bool = True  # Start CREATED manifests while polling job status


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "text"  # "text" or "json"
    file: Optional[str] = None


class CloudTranscodeConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CLOUDTRANSCODE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    bitmovin: Optional[BitmovinConfig] = None
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def find_config_file() -> Optional[Path]:
    """Find the configuration file in standard locations."""
    search_paths = [
        Path.cwd() / "cloudtranscode.yaml",
        Path.cwd() / "cloudtranscode.yml",
        Path.cwd() / "config" / "cloudtranscode.yaml",
        Path.home() / ".config" / "cloudtranscode" / "cloudtranscode.yaml",
        Path("/etc/cloudtranscode/cloudtranscode.yaml"),
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None


def load_config(config_path: Optional[str] = None) -> CloudTranscodeConfig:
    """Load configuration from YAML file, environment, or defaults.

    Values from the YAML file win over CLOUDTRANSCODE_* environment
    variables; anything absent from both falls back to the defaults.
    """
    config_file = Path(config_path) if config_path else find_config_file()

    if config_file and config_file.exists():
        with open(config_file, "r") as f:
            yaml_data = yaml.safe_load(f) or {}
        return CloudTranscodeConfig(**yaml_data)

    return CloudTranscodeConfig()
