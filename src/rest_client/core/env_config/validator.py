"""
Pydantic validators for externally supplied options.

Only the data-like part of ClientOptions can come from environment or
files; callables (authenticator, classify_response, encode, ...) are passed
as overrides in code.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..logging.config import LoggingConfig
from ..options import DEFAULT_USER_AGENT, ClientCertificate, ClientOptions, DecompressionMethod

DecompressionName = Literal["gzip", "deflate", "br"]


class LoggingSettings(BaseModel):
    """Logging configuration from environment or file."""

    model_config = ConfigDict(extra='forbid')

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    format: Literal["json", "text"] = Field(default="text")
    enable_console: bool = Field(default=True)
    file_path: Optional[str] = None
    max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="10MB")
    backup_count: int = Field(default=5, ge=0)
    enable_correlation_id: bool = Field(default=True)
    extra_fields: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('level', mode='before')
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    def to_logging_config(self) -> LoggingConfig:
        return LoggingConfig.create(**self.model_dump())


class ClientCertificateModel(BaseModel):
    model_config = ConfigDict(extra='forbid')

    cert_file: str
    key_file: Optional[str] = None


class OptionsModel(BaseModel):
    """
    Validated, serializable subset of ClientOptions.

    Unknown keys are rejected so typos in config files are reported
    instead of silently ignored.

    Example:
        >>> model = OptionsModel.model_validate({"base_url": "https://api.example.com"})
        >>> options = model.to_options(authenticator=JwtAuthenticator("t"))
    """

    model_config = ConfigDict(extra='forbid')

    base_url: Optional[str] = None
    base_host: Optional[str] = None

    username: Optional[str] = None
    password: Optional[str] = None
    use_default_credentials: bool = False
    pre_authenticate: bool = False
    client_certificates: List[ClientCertificateModel] = Field(default_factory=list)

    proxy: Optional[Union[str, Dict[str, str]]] = None
    cache_policy: Optional[str] = None
    follow_redirects: bool = True
    max_redirects: Optional[int] = Field(default=None, ge=0)
    max_timeout_ms: int = Field(default=0, ge=0, description="0 = no cap")
    automatic_decompression: List[DecompressionName] = Field(default_factory=lambda: ["gzip", "deflate"])
    expect_100_continue: Optional[bool] = None
    user_agent: Optional[str] = DEFAULT_USER_AGENT

    text_encoding: str = "utf-8"
    disable_charset: bool = False
    allow_multiple_default_parameters_with_same_name: bool = False

    throw_on_deserialization_error: bool = False
    fail_on_deserialization_error: bool = True
    throw_on_any_error: bool = False

    logging: Optional[LoggingSettings] = None

    @field_validator('password')
    @classmethod
    def validate_credentials_pair(cls, v: Optional[str], info) -> Optional[str]:
        """password без username не имеет смысла."""
        if v is not None and not info.data.get('username'):
            raise ValueError("password requires username")
        return v

    def to_options(self, **overrides: Any) -> ClientOptions:
        """
        Build ClientOptions; ``overrides`` win over validated values.

        Raises:
            InvalidArgumentError: ClientOptions rejected a value
        """
        kwargs: Dict[str, Any] = self.model_dump(
            exclude={'username', 'password', 'client_certificates', 'logging', 'automatic_decompression'}
        )
        if self.username is not None:
            kwargs['credentials'] = (self.username, self.password or "")
        kwargs['client_certificates'] = tuple(
            ClientCertificate(c.cert_file, c.key_file) for c in self.client_certificates
        )
        kwargs['automatic_decompression'] = frozenset(
            DecompressionMethod(m) for m in self.automatic_decompression
        )
        if self.logging is not None:
            kwargs['logging'] = self.logging.to_logging_config()

        kwargs.update(overrides)
        return ClientOptions(**kwargs)


class RestClientSettings(BaseSettings):
    """
    ClientOptions из переменных окружения.

    Reads from:
    1. Environment variables (REST_CLIENT_*)
    2. .env file
    3. Defaults

    Example .env file:
        REST_CLIENT_BASE_URL=https://api.example.com
        REST_CLIENT_MAX_TIMEOUT_MS=5000
        REST_CLIENT_AUTOMATIC_DECOMPRESSION=gzip,br
        REST_CLIENT_THROW_ON_ANY_ERROR=true
        REST_CLIENT_LOG_LEVEL=DEBUG

    Логирование включается, только если задан REST_CLIENT_LOG_LEVEL.
    """

    model_config = SettingsConfigDict(
        env_prefix='REST_CLIENT_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: Optional[str] = None
    base_host: Optional[str] = None

    username: Optional[str] = None
    password: Optional[str] = None
    use_default_credentials: bool = False
    pre_authenticate: bool = False
    client_cert_file: Optional[str] = None
    client_key_file: Optional[str] = None

    proxy: Optional[str] = None
    cache_policy: Optional[str] = None
    follow_redirects: bool = True
    max_redirects: Optional[int] = Field(default=None, ge=0)
    max_timeout_ms: int = Field(default=0, ge=0)
    # Comma separated: "gzip,deflate,br"; empty string disables compression
    automatic_decompression: str = "gzip,deflate"
    expect_100_continue: Optional[bool] = None
    user_agent: Optional[str] = DEFAULT_USER_AGENT

    text_encoding: str = "utf-8"
    disable_charset: bool = False
    allow_multiple_default_parameters_with_same_name: bool = False

    throw_on_deserialization_error: bool = False
    fail_on_deserialization_error: bool = True
    throw_on_any_error: bool = False

    # Logging
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    log_format: Literal["json", "text"] = "text"
    log_enable_console: bool = True
    log_file_path: Optional[str] = None

    @field_validator('log_level', 'log_format', mode='before')
    @classmethod
    def normalize_case(cls, v: Any, info) -> Any:
        if not isinstance(v, str):
            return v
        return v.upper() if info.field_name == 'log_level' else v.lower()

    def to_options_model(self) -> OptionsModel:
        """Convert flat env settings to OptionsModel."""
        data = self.model_dump(
            exclude={
                'client_cert_file', 'client_key_file', 'automatic_decompression',
                'log_level', 'log_format', 'log_enable_console', 'log_file_path',
            }
        )
        data['automatic_decompression'] = [
            name.strip().lower() for name in self.automatic_decompression.split(",") if name.strip()
        ]
        if self.client_cert_file:
            data['client_certificates'] = [
                {'cert_file': self.client_cert_file, 'key_file': self.client_key_file}
            ]
        if self.log_level is not None:
            data['logging'] = {
                'level': self.log_level,
                'format': self.log_format,
                'enable_console': self.log_enable_console,
                'file_path': self.log_file_path,
            }
        return OptionsModel.model_validate(data)
