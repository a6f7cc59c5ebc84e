"""Client configuration assembled once at startup from the environment."""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from openai import AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_MODEL = "Qwen/QwQ-32B"
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."


class ClientConfig(BaseModel):
    """Settings for the model backend and the interactive session.

    Attributes:
        api_key: Credential for the chat-completion backend.
        base_url: Optional override of the backend base URL.
        model: Model identifier sent with every request.
        max_tokens: Upper bound on generated tokens per request.
        temperature: Sampling temperature.
        system_prompt: System preamble that opens every conversation.
        log_level: Level name passed to ``setup_logging``.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    base_url: Optional[str] = None
    model: str = DEFAULT_MODEL
    max_tokens: int = Field(default=1000, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, load_env_file: bool = True) -> "ClientConfig":
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.
            load_env_file: Whether to load a ``.env`` file into ``os.environ`` first.

        Returns:
            The validated configuration.

        Raises:
            ConfigurationError: If the API key is missing or a value is invalid.
        """
        if load_env_file:
            load_dotenv()
        env = os.environ if environ is None else environ

        api_key = (env.get("OPENAI_API_KEY") or "").strip()
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set. Add it to your environment or .env file.")

        values = {
            "api_key": api_key,
            "base_url": env.get("BASE_URL") or env.get("OPENAI_BASE_URL") or None,
        }
        for field_name, env_name in (
            ("model", "MODEL"),
            ("max_tokens", "MAX_TOKENS"),
            ("temperature", "TEMPERATURE"),
            ("system_prompt", "SYSTEM_PROMPT"),
            ("log_level", "LOG_LEVEL"),
        ):
            raw = env.get(env_name)
            if raw is not None and raw.strip():
                values[field_name] = raw.strip()

        try:
            config = cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        logger.debug("Loaded configuration for model '%s' (base_url=%s).", config.model, config.base_url)
        return config

    def build_client(self) -> AsyncOpenAI:
        """Create the async OpenAI client for this configuration."""
        return AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
