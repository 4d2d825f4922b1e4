"""
Configuration management for OSP Devices.

Uses Pydantic Settings for environment variable validation and type safety.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from osp_devices import DEFAULT_CONFIG


class MetadataConfig(BaseSettings):
    """OpenStack metadata source configuration."""
    
    config_drive_dir: str = Field(
        default=DEFAULT_CONFIG["config_drive_dir"],
        description="Directory holding the config drive meta_data.json and network_data.json"
    )
    host_config_drive_dir: str = Field(
        default=DEFAULT_CONFIG["host_config_drive_dir"],
        description="Host-mounted variant of the config drive directory"
    )
    service_url: str = Field(
        default=DEFAULT_CONFIG["metadata_service_url"],
        description="Metadata service base URL (fallback source)"
    )
    use_host_path: bool = Field(
        default=True,
        description="Read the config drive from the host-mounted directory"
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="Metadata service request timeout in seconds"
    )
    retry_attempts: int = Field(
        default=4,
        ge=0,
        description="Number of retry attempts for failed metadata service calls"
    )
    retry_backoff: float = Field(
        default=0.5,
        ge=0.0,
        description="Exponential backoff factor between retries"
    )
    
    class Config:
        env_prefix = "OSP_METADATA_"


class SysfsConfig(BaseSettings):
    """Sysfs location used by the hardware facilities."""
    
    root: str = Field(
        default=DEFAULT_CONFIG["sysfs_root"],
        description="Mount point of sysfs"
    )
    
    class Config:
        env_prefix = "OSP_SYSFS_"


class AppConfig(BaseSettings):
    """Main application configuration."""
    
    log_level: str = Field(
        default=DEFAULT_CONFIG["log_level"],
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    
    # Nested configurations
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    sysfs: SysfsConfig = Field(default_factory=SysfsConfig)
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v
    
    class Config:
        env_prefix = "OSP_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.
    
    Lazily loads configuration on first access.
    
    Returns:
        AppConfig: The global configuration instance
    """
    global _config
    if _config is None:
        _config = AppConfig(
            metadata=MetadataConfig(),
            sysfs=SysfsConfig(),
        )
    return _config


def reload_config() -> AppConfig:
    """
    Reload configuration from environment variables.
    
    Useful for testing or when environment changes.
    
    Returns:
        AppConfig: The reloaded configuration instance
    """
    global _config
    _config = None
    return get_config()
