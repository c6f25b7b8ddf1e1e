"""
Configuration Management Module

This module defines the configuration schema for nfcu-fetch using Pydantic.
It handles:
1.  Loading configuration from YAML files (e.g., `config.yaml`).
2.  Overriding settings via environment variables (prefixed with `NFCU_FETCH_`).
3.  Defining default values for all settings.
4.  Providing typed configuration objects for the rest of the application.
"""

import logging
from typing import Optional, Dict, Any
from pathlib import Path
from pydantic import Field, BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

logger = logging.getLogger(__name__)

API_BASE = "https://mservices.navyfcu.org/"
API_HOST = "mservices.navyfcu.org"
# imitate a Nexus 6P on Android 6.0.1
USER_AGENT = "Dalvik/2.1.0 (Linux; U; Android 6.0.1; Nexus 6P Build/MMB29M)"


class DeviceConfig(BaseModel):
    """Device identity reported to the login endpoint."""
    app_version: str = "6.0.1"
    device_model: str = "Nexus 6P"
    os_platform: str = "AND"
    os_version: str = "6.0.1"


class Config(BaseSettings):
    """
    Global configuration for nfcu-fetch.

    Holds the API location, the fixed request identity, optional stored
    credentials and the CSV export location. Values come from:
    1.  Environment variables (prefixed with NFCU_FETCH_)
    2.  A YAML configuration file
    3.  Default values defined in this class
    """

    # API settings
    api_base: str = Field(
        default=API_BASE,
        description="Base URL every endpoint path is appended to"
    )
    host: str = Field(
        default=API_HOST,
        description="Value of the Host header sent with every request"
    )
    user_agent: str = Field(
        default=USER_AGENT,
        description="User-Agent header sent with every request"
    )
    timeout: Optional[float] = Field(
        default=None,
        description="Request timeout in milliseconds (None keeps the transport default)"
    )

    # Credentials
    access_number: Optional[str] = Field(
        default=None,
        description="Navy Federal access number used by the CLI and live tests"
    )
    password: Optional[str] = Field(
        default=None,
        description="Password for the access number"
    )
    cookie: Optional[str] = Field(
        default=None,
        description="Existing session cookie to reuse instead of logging in"
    )

    output_path: Path = Field(
        default=Path("./accounts"),
        description="Directory where exported account CSV files are written"
    )
    debug: bool = Field(
        default=False,
        description="Log full response bodies"
    )

    device: DeviceConfig = Field(default_factory=DeviceConfig)

    model_config = SettingsConfigDict(
        env_prefix='NFCU_FETCH_',
        env_nested_delimiter='__',
        extra='ignore'
    )

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration, optionally from a YAML file.
        """
        search_paths = [
            config_path,
            Path("config.yaml"),
            Path("config.yml"),
            Path.home() / ".nfcu_fetch" / "config.yaml",
            Path.home() / ".nfcu_fetch" / "config.yml",
        ]

        config_data: Dict[str, Any] = {}

        found_path = None
        for path in search_paths:
            if path and path.exists() and path.is_file():
                found_path = path.resolve()
                break

        if found_path:
            try:
                with open(found_path, 'r', encoding='utf-8') as f:
                    file_data = yaml.safe_load(f)
                if file_data:
                    # Relative output paths are relative to the config file
                    if 'output_path' in file_data:
                        path_val = Path(file_data['output_path'])
                        if not path_val.is_absolute():
                            file_data['output_path'] = found_path.parent / path_val
                    config_data = file_data
                logger.debug("Loaded configuration from: %s", found_path)
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Error loading config file %s: %s", found_path, e)
        else:
            logger.debug("No config file found. Using default configuration.")

        # Pydantic merges init kwargs (file data) with env vars and defaults
        return cls(**config_data)


# Global config instance
settings = Config.load()
