"""Configuration management with proper validation and environment handling."""

import logging
from enum import Enum
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fibonacci_agents.domain.exceptions import ConfigurationValidationError
from fibonacci_agents.domain.retry import RetryStrategy


class Environment(str, Enum):
    """Application environments."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class AzureOpenAIConfig(BaseSettings):
    """Azure OpenAI chat completion configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    api_key: str | None = Field(default=None, alias="AZURE_OPENAI_API_KEY", description="Azure OpenAI API key")
    endpoint: str | None = Field(
        default=None,
        alias="AZURE_OPENAI_ENDPOINT",
        description="Azure OpenAI endpoint URL",
    )
    deployment_name: str | None = Field(
        default=None,
        alias="AZURE_OPENAI_CHAT_DEPLOYMENT_NAME",
        description="Chat completion deployment name",
    )
    api_version: str = Field(
        default="2024-10-21",
        alias="AZURE_OPENAI_API_VERSION",
        description="Azure OpenAI API version",
    )
    use_azure_credential: bool = Field(
        default=False,
        alias="AZURE_OPENAI_USE_AZURE_CREDENTIAL",
        description="Authenticate with azure-identity instead of an API key",
    )

    def missing_settings(self) -> list[str]:
        """Names of the required settings that are not set."""
        required = {
            "AZURE_OPENAI_ENDPOINT": self.endpoint,
            "AZURE_OPENAI_CHAT_DEPLOYMENT_NAME": self.deployment_name,
        }
        if not self.use_azure_credential:
            required["AZURE_OPENAI_API_KEY"] = self.api_key
        return [name for name, value in required.items() if not value]

    @property
    def is_configured(self) -> bool:
        """Check if Azure OpenAI is properly configured."""
        return not self.missing_settings()

    def require(self) -> None:
        """
        Fail fast when required settings are missing.

        Raises:
            ConfigurationValidationError: If any required setting is missing
        """
        missing = self.missing_settings()
        if missing:
            raise ConfigurationValidationError(
                f"Azure OpenAI is not configured. Please set {', '.join(missing)} in your environment or .env file.",
                config_key=missing[0],
                missing_keys=missing,
            )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str | None) -> str | None:
        """Ensure endpoint ends with /."""
        if v:
            return v if v.endswith("/") else v + "/"
        return v


class GroupChatConfig(BaseSettings):
    """Group conversation and termination policy configuration."""

    model_config = SettingsConfigDict(env_prefix="GROUP_CHAT_", env_file=".env", extra="ignore")

    maximum_iterations: int = Field(default=10, ge=1, description="Agent turns allowed per question")
    automatic_reset: bool = Field(default=True, description="Clear the transcript before each new question")


class ResilienceConfig(BaseSettings):
    """Resilience and error handling configuration."""

    model_config = SettingsConfigDict(env_prefix="RESILIENCE_", env_file=".env", extra="ignore")

    enable_retries: bool = Field(default=True, description="Retry failed completion calls")
    completion_max_attempts: int = Field(default=3, ge=1, description="Attempts per completion call")
    completion_base_delay: float = Field(default=2.0, description="Base delay between completion retries")
    completion_max_delay: float = Field(default=30.0, description="Maximum delay between completion retries")
    completion_retry_strategy: RetryStrategy = Field(
        default=RetryStrategy.EXPONENTIAL, description="Backoff strategy between completion retries"
    )
    completion_jitter: bool = Field(default=True, description="Randomise delays between completion retries")
    completion_timeout: float = Field(default=120.0, description="Timeout for a single completion call in seconds")


class ApplicationConfig(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Application environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    log_file: Path | None = Field(default=None, description="Log file path")

    # Completion backend
    use_mock_completion: bool = Field(default=False, description="Use the offline mock chat completion service")
    mock_latency: float = Field(default=0.1, ge=0.0, description="Simulated mock completion delay in seconds")

    @field_validator("environment", mode="before")
    @classmethod
    def parse_environment(cls, v: str) -> Environment:
        """Parse environment from string."""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names, reject unknown ones."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings:
    """Centralized settings management."""

    def __init__(self):
        self._app: ApplicationConfig | None = None
        self._azure: AzureOpenAIConfig | None = None
        self._group_chat: GroupChatConfig | None = None
        self._resilience: ResilienceConfig | None = None

    @property
    def app(self) -> ApplicationConfig:
        """Get application configuration."""
        if self._app is None:
            self._app = self._load(ApplicationConfig)
        return self._app

    @property
    def azure(self) -> AzureOpenAIConfig:
        """Get Azure OpenAI configuration."""
        if self._azure is None:
            self._azure = self._load(AzureOpenAIConfig)
        return self._azure

    @property
    def group_chat(self) -> GroupChatConfig:
        """Get group chat configuration."""
        if self._group_chat is None:
            self._group_chat = self._load(GroupChatConfig)
        return self._group_chat

    @property
    def resilience(self) -> ResilienceConfig:
        """Get resilience configuration."""
        if self._resilience is None:
            self._resilience = self._load(ResilienceConfig)
        return self._resilience

    @staticmethod
    def _load(config_class: type[BaseSettings]) -> BaseSettings:
        """Build one configuration section, reporting bad values as a configuration error."""
        try:
            return config_class()
        except ValidationError as e:
            fields = [".".join(str(part) for part in error["loc"]) for error in e.errors()]
            problems = [f"{field}: {error['msg']}" for field, error in zip(fields, e.errors(), strict=True)]
            raise ConfigurationValidationError(
                f"Invalid {config_class.__name__} settings. " + "; ".join(problems),
                config_key=fields[0] if fields else None,
            ) from e

    def load(self) -> None:
        """
        Build every configuration section now.

        Raises:
            ConfigurationValidationError: If any section holds an invalid value
        """
        for section in ("app", "azure", "group_chat", "resilience"):
            getattr(self, section)

    def validate(self) -> None:
        """
        Check the settings needed to start a conversation.

        Raises:
            ConfigurationValidationError: If the completion backend is not configured
        """
        if not self.app.use_mock_completion:
            self.azure.require()

    def reload(self) -> None:
        """Reload all configurations."""
        self._app = None
        self._azure = None
        self._group_chat = None
        self._resilience = None


# Global settings instance
settings = Settings()
