"""Configuration for yumldot with validation."""

import shutil
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict
import structlog
import toml

log = structlog.get_logger()

CONFIG_FILENAME = "yumldot.toml"
USER_CONFIG = "~/.yumldot/config.toml"


class RendererConfig(BaseModel):
    """Graphviz renderer configuration."""
    binary: str = "dot"
    format: str = Field(default="svg", pattern="^(svg|png|pdf|jpg)$")
    timeout_s: float = Field(gt=0, default=30.0)

    @field_validator('binary')
    @classmethod
    def binary_not_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('Renderer binary cannot be empty')
        return v.strip()


class YumlConfig(BaseModel):
    """Main configuration for yumldot with validation."""

    model_config = ConfigDict(validate_assignment=True)

    renderer: RendererConfig = Field(default_factory=RendererConfig)

    # Output
    dark_mode: bool = False

    # Logging
    log_level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")
    log_file: Optional[Path] = None
    log_json: bool = False

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_log_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @classmethod
    def load(cls, path: Optional[str] = None) -> 'YumlConfig':
        """Load configuration from TOML file.

        Search order if path not provided:
        1. ./yumldot.toml (project-specific)
        2. ~/.yumldot/config.toml (user default)

        Args:
            path: Optional explicit config file path

        Returns:
            YumlConfig instance
        """
        if path is None:
            candidates = [
                Path(CONFIG_FILENAME),
                Path(USER_CONFIG).expanduser()
            ]
            for candidate in candidates:
                if candidate.exists():
                    path = str(candidate)
                    log.debug("config_found", path=path)
                    break

        if path and Path(path).exists():
            try:
                data = toml.load(path)
                log.debug("config_loaded", path=path)
                return cls(**data)
            except (toml.TomlDecodeError, ValueError) as e:
                log.error("config_load_failed", path=path, error=str(e))
                return cls()

        log.debug("config_using_defaults")
        return cls()

    def save(self, path: str):
        """Save configuration to TOML file.

        Args:
            path: File path to save to
        """
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            data = self.model_dump(mode='json', exclude_none=True)
            toml.dump(data, f)
        log.info("config_saved", path=path)


def validate_config(config: YumlConfig) -> list[str]:
    """Validate configuration and return warnings.

    Args:
        config: Config to validate

    Returns:
        List of warning messages
    """
    warnings = []

    if shutil.which(config.renderer.binary) is None:
        warnings.append(
            f"Renderer '{config.renderer.binary}' not found on PATH "
            f"(needed for 'yumldot render', not for 'yumldot compile')"
        )

    if config.log_file is not None:
        log_dir = Path(config.log_file).expanduser().parent
        if log_dir.exists() and not log_dir.is_dir():
            warnings.append(f"Log file directory is not a directory: {log_dir}")

    return warnings
