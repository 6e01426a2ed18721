"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults that match the historical behavior (12000 / 50 chunking)

Collaborators:
  - api/main.py: reads settings for CORS and startup logging
  - container.py: turns settings into a ChunkBudget and a transformer
  - interfaces/api/http/schemas: reads request limits

Constraints:
  - Lives in crosscutting layer, NOT in domain/application
  - The segmenter never reads Settings: the budget is passed explicitly

Notes:
  - Singleton via lru_cache
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Campos que cada provider necesita no vacíos; sin ellos => modo demo.
_PROVIDER_REQUIREMENTS: dict[str, tuple[str, ...]] = {
    "google": ("google_api_key",),
    "openai": ("openai_api_key",),
    "anthropic": ("anthropic_api_key",),
    "azure": ("azure_openai_api_key", "azure_openai_endpoint", "azure_openai_deployment"),
    "huggingface": ("huggingface_api_key", "huggingface_model"),
    "local": ("local_llm_endpoint", "local_llm_model"),
    "demo": (),
}

SUPPORTED_PROVIDERS: tuple[str, ...] = tuple(_PROVIDER_REQUIREMENTS)

# Valores de ejemplo que circulan en .env viejos.
_PLACEHOLDER_KEYS: frozenset[str] = frozenset({"demo-key", "tu_clave_api_de_google_aqui"})


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/production)
        log_level: Logger level (default: INFO)
        log_json: Emit JSON logs (default: True)
        allowed_origins: Comma-separated CORS origins
        ai_provider: google|openai|anthropic|azure|huggingface|local|demo (default: google)
        provider_timeout_seconds: HTTP timeout for remote providers
        google_api_key: Google Gemini API key
        google_model: Default Gemini model
        openai_api_key / openai_model: OpenAI credentials and default model
        anthropic_api_key / anthropic_model: Anthropic credentials and default model
        azure_openai_*: Azure OpenAI key, endpoint, deployment and API version
        huggingface_*: Inference API key, model and base URL
        local_llm_endpoint: Base URL of an Ollama-compatible server
        local_llm_model: Model name for the local server
        local_llm_timeout_seconds: HTTP timeout for the local server
        max_chunk_size: Characters per segment (default: 12000)
        overlap_size: Overlap between windowed segments (default: 50)
        max_input_tokens: Re-split segments above this token estimate (0 = off)
        max_text_chars: Maximum text length per request
        max_body_bytes: Max request body size (default: 50MB)
        default_temperature: Sampling temperature (default: 0.3)
        default_max_output_tokens: Output token ceiling (default: 4000)
        retry_max_attempts: Transformer retries (default: 3)
    """

    # Environment
    app_env: str = "development"
    log_level: str = "INFO"
    log_json: bool = True

    # CORS configuration
    allowed_origins: str = "*"

    # Provider
    ai_provider: str = "google"
    provider_timeout_seconds: float = 120.0
    google_api_key: str = ""
    google_model: str = "gemini-2.5-flash"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-haiku-4-5"
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_deployment: str = "gpt-35-turbo"
    azure_openai_api_version: str = "2024-02-15-preview"
    huggingface_api_key: str = ""
    huggingface_model: str = "meta-llama/Llama-2-70b-chat-hf"
    huggingface_endpoint: str = "https://router.huggingface.co/hf-inference/models"
    local_llm_endpoint: str = ""
    local_llm_model: str = "llama2"
    local_llm_timeout_seconds: float = 120.0

    # Chunking configuration (defaults match current behavior)
    max_chunk_size: int = 12000
    overlap_size: int = 50
    max_input_tokens: int = 0  # 0 = sin límite de tokens por fragmento

    # API limits
    max_text_chars: int = 5_000_000
    max_body_bytes: int = 50 * 1024 * 1024  # 50MB

    # Transform defaults
    default_temperature: float = 0.3
    default_max_output_tokens: int = 4000

    # Retry/Resilience
    retry_max_attempts: int = 3
    retry_base_delay_seconds: float = 1.0
    retry_max_delay_seconds: float = 30.0

    @field_validator("max_chunk_size")
    @classmethod
    def max_chunk_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_chunk_size must be greater than 0")
        return v

    @field_validator("overlap_size")
    @classmethod
    def overlap_size_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("overlap_size must be >= 0")
        return v

    @field_validator("max_input_tokens")
    @classmethod
    def max_input_tokens_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_input_tokens must be >= 0")
        return v

    @field_validator("ai_provider")
    @classmethod
    def ai_provider_supported(cls, v: str) -> str:
        provider = (v or "google").strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"ai_provider must be one of {', '.join(SUPPORTED_PROVIDERS)}"
            )
        return provider

    @field_validator("default_temperature")
    @classmethod
    def temperature_in_range(cls, v: float) -> float:
        if v < 0 or v > 2:
            raise ValueError("default_temperature must be between 0 and 2")
        return v

    def validate_chunk_params(self) -> None:
        """
        Cross-field validation: overlap must be less than max_chunk_size.
        Called explicitly after instantiation.
        """
        if self.overlap_size >= self.max_chunk_size:
            raise ValueError(
                f"overlap_size ({self.overlap_size}) must be less than "
                f"max_chunk_size ({self.max_chunk_size})"
            )

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    def is_provider_configured(self) -> bool:
        """True when the selected provider has the credentials/endpoint it needs."""
        for field in _PROVIDER_REQUIREMENTS[self.ai_provider]:
            value = str(getattr(self, field)).strip()
            if not value or value in _PLACEHOLDER_KEYS:
                return False
        return True

    def provider_default_model(self) -> str:
        """Model (or deployment) the selected provider uses when no hint applies."""
        return {
            "google": self.google_model,
            "openai": self.openai_model,
            "anthropic": self.anthropic_model,
            "azure": self.azure_openai_deployment,
            "huggingface": self.huggingface_model,
            "local": self.local_llm_model,
            "demo": "demo",
        }[self.ai_provider]

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
        ValueError: If overlap_size >= max_chunk_size
    """
    settings = Settings()
    settings.validate_chunk_params()
    return settings
