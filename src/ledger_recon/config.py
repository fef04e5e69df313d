"""Configuration loader and validation for reconciliation settings."""

from enum import Enum
from pathlib import Path
from typing import Any, Optional
import logging

import yaml
from pydantic import BaseModel, Field, ValidationError

from .utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ProcessingMode(Enum):
    """Classification fidelity; only affects the external call."""

    FAST = "fast"
    THOROUGH = "pro"


class ClassificationConfig(BaseModel):
    """Configuration for the external classification service."""

    api_key_env: str = "GEMINI_API_KEY"
    fast_model: str = "gemini-3-flash-preview"
    thorough_model: str = "gemini-3-pro-preview"
    temperature: Optional[float] = None
    # 0 disables model thinking for fast mode
    fast_thinking_budget: Optional[int] = 0

    def model_for(self, mode: ProcessingMode) -> str:
        """Return the model name used for a processing mode."""
        return self.thorough_model if mode is ProcessingMode.THOROUGH else self.fast_model


class ExportConfig(BaseModel):
    """Configuration for export artifacts."""

    currency_label: str = "GHS"
    base_filename: str = "reconciliation_report"
    report_title: str = "Reconciliation Report"
    classification_label: str = "Protected"
    default_company_label: str = "Financial"
    # A section starts on a new page when less than this remains (millimetres)
    section_break_threshold_mm: float = 40.0


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseModel):
    """Main configuration model."""

    classification: ClassificationConfig = Field(default_factory=ClassificationConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    config_file_path: Optional[str] = None


def get_default_config() -> dict[str, Any]:
    """Return the default configuration as a dictionary."""
    return {
        "classification": {
            "api_key_env": "GEMINI_API_KEY",
            "fast_model": "gemini-3-flash-preview",
            "thorough_model": "gemini-3-pro-preview",
            "temperature": None,
            "fast_thinking_budget": 0,
        },
        "export": {
            "currency_label": "GHS",
            "base_filename": "reconciliation_report",
            "report_title": "Reconciliation Report",
            "classification_label": "Protected",
            "default_company_label": "Financial",
            "section_break_threshold_mm": 40.0,
        },
        "logging": {
            "level": "INFO",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from a YAML file or use defaults.

    Args:
        config_path: Path to YAML configuration file (optional)

    Returns:
        AppConfig with loaded or default settings

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    config_dict = get_default_config()

    if config_path and config_path.exists():
        logger.info(f"Loading configuration from: {config_path}")
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(user_config, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {config_path}")

        config_dict = _deep_merge(config_dict, user_config)
        config_dict["config_file_path"] = str(config_path)
    else:
        logger.info("Using default configuration")

    try:
        return AppConfig(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _deep_merge(base: dict, override: dict) -> dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary to merge on top

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def generate_default_config(output_path: Path) -> None:
    """
    Generate a default configuration file.

    Args:
        output_path: Path to write the configuration file
    """
    yaml_content = """# Bank statement / general ledger reconciliation configuration
# Generated configuration file - customize as needed

"""
    yaml_content += yaml.dump(get_default_config(), default_flow_style=False, sort_keys=False)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write(yaml_content)

    logger.info(f"Generated configuration file: {output_path}")
