"""Configuration Manager for backend credentials and logging settings."""

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..utils.exceptions import ConfigurationError
from ..utils.logging import get_logger

_ENV_REFERENCE = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class BackendConfig:
    """Hosted backend connection settings."""

    url: str = ""
    key: str = ""
    schema: str = "public"
    timeout: float = 10.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BackendConfig":
        """Create BackendConfig from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class LoggingConfig:
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "human"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5
    console_output: bool = True
    file_output: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        """Create LoggingConfig from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


class AppConfig(BaseModel):
    """Main application configuration model."""

    app_name: str = Field(default="Interview Data", description="Application name")
    environment: str = Field(default="development", description="Environment")
    backend: BackendConfig = Field(default_factory=BackendConfig, description="Backend settings")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging settings")

    class Config:
        validate_assignment = True


class ConfigurationManager:
    """Loads configuration from ``.env``, YAML files and the environment.

    Later sources win: ``config.yaml``, then ``config.<ENVIRONMENT>.yaml``,
    then the ``SUPABASE_*`` and ``LOG_LEVEL`` environment variables.
    """

    def __init__(self, config_path: str = "config", env_file: str = ".env"):
        """Initialize the configuration manager.

        Args:
            config_path: Path to configuration directory.
            env_file: Path to environment file.
        """
        self.config_path = Path(config_path)
        self.env_file = Path(env_file)
        self.config: Optional[AppConfig] = None
        self.logger = get_logger(__name__)

    def initialize(self) -> None:
        """Load and validate the configuration.

        Raises:
            ConfigurationError: If a file cannot be parsed or a required
                setting is missing or invalid.
        """
        try:
            self._load_environment_variables()
            config_data = self._load_configuration_files()
            config_data = self._apply_environment_overrides(config_data)
            self.config = AppConfig.model_validate(config_data)
            self._validate_configuration()
            self.logger.info("ConfigurationManager initialized successfully")

        except ConfigurationError:
            raise
        except Exception as e:
            self.logger.error(f"Failed to initialize ConfigurationManager: {str(e)}")
            raise ConfigurationError(f"Configuration initialization failed: {str(e)}") from e

    def _load_environment_variables(self) -> None:
        """Load environment variables from the .env file without overriding the process environment."""
        if self.env_file.exists():
            load_dotenv(self.env_file, override=False)
            self.logger.info(f"Loaded environment variables from {self.env_file}")

    def _load_configuration_files(self) -> Dict[str, Any]:
        """Load configuration from YAML files on top of the defaults."""
        config_data = AppConfig().model_dump()

        main_config_file = self.config_path / "config.yaml"
        if main_config_file.exists():
            config_data = self._map_flat_config_to_nested(self._load_yaml_file(main_config_file), config_data)
            self.logger.info(f"Loaded main configuration from {main_config_file}")

        environment = os.getenv("ENVIRONMENT", config_data["environment"])
        env_config_file = self.config_path / f"config.{environment}.yaml"
        if env_config_file.exists():
            config_data = self._map_flat_config_to_nested(self._load_yaml_file(env_config_file), config_data)
            self.logger.info(f"Loaded environment configuration from {env_config_file}")

        return config_data

    def _map_flat_config_to_nested(self, flat_config: Dict[str, Any], nested_config: Dict[str, Any]) -> Dict[str, Any]:
        """Map the YAML file layout onto the AppConfig structure.

        Args:
            flat_config: Configuration from a YAML file
            nested_config: Configuration built so far

        Returns:
            Updated nested configuration
        """
        flat_config = self._substitute_environment(flat_config)

        if "app" in flat_config:
            nested_config["app_name"] = flat_config["app"].get("name", nested_config["app_name"])
            nested_config["environment"] = flat_config["app"].get("environment", nested_config["environment"])

        if "backend" in flat_config:
            backend = flat_config["backend"]
            for key in ("url", "key", "schema", "timeout"):
                if backend.get(key) is not None:
                    nested_config["backend"][key] = backend[key]

        if "logging" in flat_config:
            logging_section = flat_config["logging"]
            nested_config["logging"]["level"] = logging_section.get("level", nested_config["logging"]["level"])
            nested_config["logging"]["format"] = logging_section.get("format", nested_config["logging"]["format"])
            nested_config["logging"]["file_path"] = logging_section.get("file", nested_config["logging"]["file_path"])
            if "max_size_mb" in logging_section:
                nested_config["logging"]["max_file_size"] = logging_section["max_size_mb"] * 1024 * 1024
            nested_config["logging"]["backup_count"] = logging_section.get("backup_count", nested_config["logging"]["backup_count"])
            nested_config["logging"]["file_output"] = nested_config["logging"]["file_path"] is not None

        return nested_config

    def _substitute_environment(self, value: Any) -> Any:
        """Replace ``${VAR}`` strings with the value of the environment variable."""
        if isinstance(value, dict):
            return {k: self._substitute_environment(v) for k, v in value.items()}
        if isinstance(value, list):
            return [self._substitute_environment(v) for v in value]
        if isinstance(value, str):
            match = _ENV_REFERENCE.match(value.strip())
            if match:
                env_var_name = match.group(1)
                resolved = os.getenv(env_var_name)
                if resolved is None:
                    self.logger.warning(f"Environment variable {env_var_name} is not set")
                    return None
                return resolved
        return value

    def _apply_environment_overrides(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Apply SUPABASE_* and LOG_LEVEL environment variables."""
        overrides = {
            "url": os.getenv("SUPABASE_URL"),
            "key": os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY"),
            "schema": os.getenv("SUPABASE_SCHEMA"),
            "timeout": os.getenv("SUPABASE_TIMEOUT"),
        }
        for key, value in overrides.items():
            if value:
                config_data["backend"][key] = value

        if os.getenv("ENVIRONMENT"):
            config_data["environment"] = os.environ["ENVIRONMENT"]
        if os.getenv("LOG_LEVEL"):
            config_data["logging"]["level"] = os.environ["LOG_LEVEL"]

        return config_data

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load YAML file content.

        Raises:
            ConfigurationError: If the file is not valid YAML or not a mapping.
        """
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {file_path}: {e}", details={"file": str(file_path)}) from e

        if not isinstance(content, dict):
            raise ConfigurationError(f"Configuration file {file_path} must contain a mapping", details={"file": str(file_path)})
        return content

    def _validate_configuration(self) -> None:
        """Validate the loaded configuration."""
        backend = self.config.backend

        if not backend.url:
            raise ConfigurationError("Backend URL is not configured (set SUPABASE_URL)", config_key="backend.url")
        if not backend.url.startswith(("http://", "https://")):
            raise ConfigurationError(f"Backend URL must be an http(s) URL: {backend.url}", config_key="backend.url")
        if not backend.key:
            raise ConfigurationError("Backend API key is not configured (set SUPABASE_KEY)", config_key="backend.key")
        if backend.timeout <= 0:
            raise ConfigurationError("Backend timeout must be positive", config_key="backend.timeout")

        level = self.config.logging.level.upper()
        if level not in _LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.config.logging.level}", config_key="logging.level")
        self.config.logging.level = level

        self.logger.debug("Configuration validation completed successfully")

    def get_config(self) -> AppConfig:
        """Get the current configuration.

        Raises:
            ConfigurationError: If configuration is not loaded.
        """
        if not self.config:
            raise ConfigurationError("Configuration not loaded")
        return self.config

    def get_backend_config(self) -> BackendConfig:
        """Get the backend connection settings."""
        return self.get_config().backend

    def get_logging_config(self) -> LoggingConfig:
        """Get the logging settings."""
        return self.get_config().logging

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a specific configuration setting.

        Args:
            key: Configuration key (dot notation supported).
            default: Default value if key not found.

        Returns:
            Configuration value.
        """
        if not self.config:
            return default

        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            elif hasattr(value, k):
                value = getattr(value, k)
            else:
                return default

        return value
