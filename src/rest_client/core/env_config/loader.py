"""
Configuration loader from environment variables and .env files.

Main entry point for building ClientOptions outside of code.
"""

from typing import Any, Optional

from pydantic import ValidationError

from ..exceptions import InvalidArgumentError
from ..options import ClientOptions
from .file_loader import ConfigValidationError
from .validator import RestClientSettings


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> ClientOptions:
    """
    Load ClientOptions from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit ClientOptions fields
    2. Environment variables (REST_CLIENT_*)
    3. .env file (``env_file`` or ./.env)
    4. Defaults

    Args:
        env_file: Custom .env file path
        **overrides: ClientOptions fields (authenticator, classify_response, ...)

    Raises:
        ConfigValidationError: Invalid values in environment or .env

    Example:
        >>> options = load_from_env()
        >>> options = load_from_env(
        ...     env_file=".env.production",
        ...     authenticator=JwtAuthenticator(token),
        ... )
    """
    try:
        if env_file is not None:
            settings = RestClientSettings(_env_file=env_file)
        else:
            settings = RestClientSettings()
        model = settings.to_options_model()
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid REST_CLIENT_* environment: {e}") from e

    try:
        return model.to_options(**overrides)
    except (InvalidArgumentError, ValueError) as e:
        raise ConfigValidationError(f"Invalid REST_CLIENT_* environment: {e}") from e
