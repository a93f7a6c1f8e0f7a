from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from dynreqs.exceptions import ConfigError
from dynreqs.logging import get_logger

__all__ = [
    "DynreqsConfig",
    "load_config",
    "get_user_config_path",
    "PROJECT_CONFIG_NAME",
]

logger = get_logger(__name__)

PROJECT_CONFIG_NAME = "dynreqs.yaml"

# Project config path for the load in progress; set by load_config()
_project_config_path: ContextVar[Path | None] = ContextVar(
    "dynreqs_project_config_path", default=None
)


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_file}: {e}") from e

            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(f"Config file {yaml_file} must contain a mapping")
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class DynreqsConfig(BaseSettings):
    """Root settings object for the dynreqs command line.

    Attributes:
        pureperl_only: Request a build without native code (True), an
            explicitly compiled build (False), or no preference (None).
        use_default: Answer interactive prompts with their defaults.
        build_config: Overrides for build configuration values consulted by
            ``config_enabled`` and ``can_xs``.
        output_format: Format of resolved prerequisites on stdout.
        verbosity: Log level used when no -v/-q flag is given.

    Example dynreqs.yaml:
        pureperl_only: false
        use_default: true
        build_config:
          CC: clang
        output_format: yaml
    """

    model_config = SettingsConfigDict(
        env_prefix="DYNREQS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    pureperl_only: bool | None = None
    use_default: bool = False
    build_config: dict[str, str] = Field(default_factory=dict)
    output_format: Literal["json", "yaml"] = "json"
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    @field_validator("build_config", mode="before")
    @classmethod
    def stringify_build_config(cls, v: Any) -> Any:
        """Accept numbers and booleans in YAML build_config values."""
        if isinstance(v, dict):
            return {
                str(key): ("1" if value is True else "0" if value is False else str(value))
                for key, value in v.items()
            }
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of settings sources.

        Priority (highest to lowest):
        1. Init settings (explicit keyword arguments)
        2. Environment variables (DYNREQS_*)
        3. Project YAML config (./dynreqs.yaml or --config)
        4. User YAML config (~/.config/dynreqs/config.yaml)
        5. Defaults
        """
        project_config_path = (
            _project_config_path.get() or Path.cwd() / PROJECT_CONFIG_NAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/dynreqs/config.yaml
    """
    return Path.home() / ".config" / "dynreqs" / "config.yaml"


def load_config(config_path: Path | None = None) -> DynreqsConfig:
    """Load settings with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to the project config file. Defaults to
            ./dynreqs.yaml

    Returns:
        DynreqsConfig instance with merged configuration

    Raises:
        ConfigError: If configuration is invalid, or an explicitly given
            config file does not exist.
    """
    if config_path is not None and not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    if config_path is None and not (Path.cwd() / PROJECT_CONFIG_NAME).exists():
        logger.debug("no_project_config")

    token = _project_config_path.set(config_path)
    try:
        return DynreqsConfig()
    except ValidationError as e:
        first_error = e.errors()[0]
        field = ".".join(str(loc) for loc in first_error["loc"])
        raise ConfigError(
            message=f"Invalid configuration: {first_error['msg']}",
            field=field,
            value=first_error.get("input"),
        ) from e
    finally:
        _project_config_path.reset(token)
