"""
Configuration file loader for YAML and JSON files.

Supports loading ClientOptions from external configuration files.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..exceptions import ConfigurationError, InvalidArgumentError
from ..options import ClientOptions
from .validator import OptionsModel

CONFIG_FILE_ENV_VAR = "REST_CLIENT_CONFIG_FILE"


class ConfigValidationError(ConfigurationError):
    """Raised when configuration data is invalid."""

    pass


class OptionsFileLoader:
    """
    Загрузчик ClientOptions из файлов.

    Supports YAML and JSON formats with automatic format detection.
    Данные могут лежать в секции ``rest_client`` или на верхнем уровне.

    Examples:
        >>> options = OptionsFileLoader.from_yaml("client.yaml")
        >>> options = OptionsFileLoader.from_file("client.json", authenticator=JwtAuthenticator(token))
        >>> options = OptionsFileLoader.from_env_path()  # From REST_CLIENT_CONFIG_FILE env var
    """

    @staticmethod
    def from_yaml(path: Union[str, Path], **overrides: Any) -> ClientOptions:
        """
        Загрузить опции из YAML файла.

        Args:
            path: Путь к YAML файлу
            **overrides: Поля ClientOptions поверх файла (callable, authenticator)

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
            ImportError: Если PyYAML не установлен
        """
        try:
            import yaml
        except ImportError:
            raise ImportError(
                "PyYAML is required to load YAML configs. "
                "Install it with: pip install rest-client-core[yaml] or pip install pyyaml"
            )

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return OptionsFileLoader._build_options(data, str(path), overrides)

    @staticmethod
    def from_json(path: Union[str, Path], **overrides: Any) -> ClientOptions:
        """
        Загрузить опции из JSON файла.

        Raises:
            FileNotFoundError: Если файл не найден
            ConfigValidationError: Если конфиг невалидный
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid JSON syntax in {path}: {e}")

        if not data:
            raise ConfigValidationError(f"Empty config file: {path}")

        return OptionsFileLoader._build_options(data, str(path), overrides)

    @staticmethod
    def from_file(path: Union[str, Path], **overrides: Any) -> ClientOptions:
        """
        Автоопределение формата по расширению (.yaml, .yml, .json).

        Raises:
            ValueError: Если формат не поддерживается
        """
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in [".yaml", ".yml"]:
            return OptionsFileLoader.from_yaml(path, **overrides)
        elif suffix == ".json":
            return OptionsFileLoader.from_json(path, **overrides)
        else:
            raise ValueError(
                f"Unsupported config file format: {suffix}. "
                f"Supported formats: .yaml, .yml, .json"
            )

    @staticmethod
    def from_env_path(**overrides: Any) -> Optional[ClientOptions]:
        """
        Загрузить из пути, указанного в REST_CLIENT_CONFIG_FILE.

        Returns:
            ClientOptions or None if env var not set

        Example:
            >>> # export REST_CLIENT_CONFIG_FILE=/etc/myapp/client.yaml
            >>> options = OptionsFileLoader.from_env_path()
        """
        config_path = os.environ.get(CONFIG_FILE_ENV_VAR)
        if not config_path:
            return None

        return OptionsFileLoader.from_file(config_path, **overrides)

    @staticmethod
    def _build_options(data: Any, source: str, overrides: Dict[str, Any]) -> ClientOptions:
        """
        Build ClientOptions from parsed data.

        Raises:
            ConfigValidationError: If config is invalid
        """
        if isinstance(data, dict) and "rest_client" in data:
            config_data = data["rest_client"]
        else:
            config_data = data

        if not isinstance(config_data, dict):
            raise ConfigValidationError(
                f"Config must be a dictionary, got {type(config_data).__name__} in {source}"
            )

        try:
            model = OptionsModel.model_validate(config_data)
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}") from e

        try:
            return model.to_options(**overrides)
        except (InvalidArgumentError, ValueError) as e:
            raise ConfigValidationError(f"Invalid config in {source}: {e}") from e
