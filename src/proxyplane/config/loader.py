"""Configuration loading.

Layers, lowest to highest precedence:

    built-in defaults
    ~/.config/proxyplane/config.yaml
    <project>/.proxyplane/config.yaml   (or an explicit ``config_file``)
    PROXYPLANE__<SECTION>__<KEY> environment variables
    keyword overrides passed to ``load_config``
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from proxyplane.config.models import LoggingConfig, ProxyConfig, ProxyPlaneConfig
from proxyplane.core.errors import ConfigError

GLOBAL_CONFIG_PATH = Path("~/.config/proxyplane/config.yaml").expanduser()
PROJECT_CONFIG_PATH = Path(".proxyplane") / "config.yaml"


def read_yaml_file(path: Path, *, required: bool = False) -> dict[str, Any]:
    """Parse one YAML config file into a mapping.

    Missing optional files read as empty. A required file that is missing
    raises ``ConfigError.file_not_found``.
    """
    if not path.is_file():
        if required:
            raise ConfigError.file_not_found(str(path))
        return {}
    try:
        document = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError.parse_error(str(path), "top-level value must be a mapping")
    return document


def merge_layers(*layers: dict[str, Any]) -> dict[str, Any]:
    """Merge mappings left to right; nested sections merge key by key."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = merge_layers(current, value)
            else:
                merged[key] = value
    return merged


class _FileLayerSource(PydanticBaseSettingsSource):
    """Feeds already-merged YAML data to pydantic-settings."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:  # noqa: ARG002
        value = self._data.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


def settings_class_for(file_data: dict[str, Any]) -> type[BaseSettings]:
    """Build a settings class bound to one load's file data.

    A fresh class per load keeps concurrent loads from sharing YAML state.
    """

    class ProxyPlaneSettings(BaseSettings):
        """Env vars: PROXYPLANE__PROXY__STRICT, PROXYPLANE__LOGGING__LEVEL, ..."""

        model_config = SettingsConfigDict(
            env_prefix="PROXYPLANE__",
            env_nested_delimiter="__",
            case_sensitive=False,
        )

        logging: LoggingConfig = LoggingConfig()
        proxy: ProxyConfig = ProxyConfig()

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
            file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            return (init_settings, env_settings, _FileLayerSource(settings_cls, file_data))

    return ProxyPlaneSettings


ProxyPlaneSettings = settings_class_for({})


def load_config(
    project_root: Path | None = None,
    *,
    config_file: Path | None = None,
    **overrides: Any,
) -> ProxyPlaneConfig:
    """Resolve the effective configuration.

    Args:
        project_root: Directory holding ``.proxyplane/config.yaml``.
            Defaults to the current working directory.
        config_file: Explicit project config file. Replaces the
            ``.proxyplane/config.yaml`` lookup and must exist.
        **overrides: Section values that win over every other layer.

    Raises:
        ConfigError: unreadable YAML, a missing explicit file, or a value
            that fails validation.
    """
    if config_file is not None:
        project_data = read_yaml_file(config_file, required=True)
    else:
        project_data = read_yaml_file((project_root or Path.cwd()) / PROJECT_CONFIG_PATH)

    file_data = merge_layers(read_yaml_file(GLOBAL_CONFIG_PATH), project_data)

    try:
        settings = settings_class_for(file_data)(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigError.invalid_value(location, first.get("input"), first["msg"]) from e
    return ProxyPlaneConfig.model_validate(settings.model_dump())
