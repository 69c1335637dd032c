from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised at startup when required provider configuration is missing."""


class OpenAIConfig(BaseSettings):
    """Chat completion provider used for facts and scripts."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="OPENAI_API_KEY",
    )
    base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias="OPENAI_BASE_URL",
    )
    model: str = Field(default="gpt-4o-mini", validation_alias="OPENAI_MODEL")
    timeout_seconds: float = Field(
        default=30.0,
        validation_alias="OPENAI_TIMEOUT_SECONDS",
        gt=0,
    )
    facts_max_tokens: int = Field(default=500, ge=1, le=4096)
    facts_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    script_max_tokens: int = Field(default=300, ge=1, le=4096)
    script_temperature: float = Field(default=0.8, ge=0.0, le=2.0)

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


class ElevenLabsConfig(BaseSettings):
    """Speech synthesis provider configuration."""

    api_key: SecretStr | None = Field(
        default=None,
        validation_alias="ELEVENLABS_API_KEY",
    )
    base_url: str = Field(
        default="https://api.elevenlabs.io/v1",
        validation_alias="ELEVENLABS_BASE_URL",
    )
    voice_id: str = Field(
        default="21m00Tcm4TlvDq8ikWAM",
        validation_alias="ELEVENLABS_VOICE_ID",
    )
    model_id: str = Field(
        default="eleven_multilingual_v2",
        validation_alias="ELEVENLABS_MODEL_ID",
    )
    stability: float = Field(default=0.5, ge=0.0, le=1.0)
    similarity_boost: float = Field(default=0.75, ge=0.0, le=1.0)
    style: float = Field(default=0.0, ge=0.0, le=1.0)
    use_speaker_boost: bool = True
    timeout_seconds: float = Field(
        default=30.0,
        validation_alias="ELEVENLABS_TIMEOUT_SECONDS",
        gt=0,
    )
    media_type: str = "audio/mpeg"

    model_config = SettingsConfigDict(
        env_file=".env",
        secrets_dir=".secrets",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


class GeocodingConfig(BaseSettings):
    """Reverse geocoding (Nominatim) used to enrich prompts."""

    enabled: bool = True
    reverse_url: str = "https://nominatim.openstreetmap.org/reverse"
    user_agent: str = "AudioGuide/1.0 (audio-guide-app)"
    timeout_seconds: float = Field(default=5.0, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="GEOCODING_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class PipelineConfig(BaseSettings):
    """Request lifetime settings for the audio guide pipeline."""

    request_timeout_seconds: float = Field(default=90.0, gt=0)
    disconnect_poll_seconds: float = Field(default=0.5, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="PIPELINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "Audio Guide API"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_file: str = "logs/app.log"
    pipeline_log_file: str = "logs/audio_guide_pipeline.log"

    # Provider A
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)

    # Provider B
    elevenlabs: ElevenLabsConfig = Field(default_factory=ElevenLabsConfig)

    # Location enrichment
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)

    # Pipeline
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)

    # CORS
    cors_origins: list[str] = ["*"]
    cors_allow_methods: list[str] = ["POST", "OPTIONS"]
    cors_allow_headers: list[str] = ["Content-Type"]
    cors_expose_headers: list[str] = ["X-Location-Warning"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def require_credentials(self) -> None:
        """Fail fast when either provider credential is absent."""

        missing: list[str] = []
        if not _has_secret(self.openai.api_key):
            missing.append("OPENAI_API_KEY")
        if not _has_secret(self.elevenlabs.api_key):
            missing.append("ELEVENLABS_API_KEY")
        if missing:
            raise ConfigurationError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )


def _has_secret(value: SecretStr | None) -> bool:
    return value is not None and bool(value.get_secret_value().strip())


# Global settings instance
settings = Settings()
