"""Configuration management for Second Brain - provider selection and pattern observer tuning"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from the environment and `.env`.

    Provider Selection:
        Provider names are strings that map to entry points in the
        `second_brain.*` groups. Built-in providers:
        - LLM: gemini, ollama, fallback, none
        - Note store: sqlite
        - Pattern store: sqlite
    """

    # ===== Provider Selection =====
    llm_provider: str = Field(
        default="fallback",
        description="LLM provider name (discovered via second_brain.llm entry points)"
    )
    llm_fallback_chain: str = Field(
        default="gemini,ollama",
        description="Comma-separated provider names tried in order by the fallback provider"
    )
    note_store_provider: str = Field(
        default="sqlite",
        description="Note store provider name (discovered via second_brain.note_store entry points)"
    )
    pattern_store_provider: str = Field(
        default="sqlite",
        description="Pattern store provider name (discovered via second_brain.pattern_store entry points)"
    )

    # ===== Gemini Configuration =====
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_url: str = "https://generativelanguage.googleapis.com"
    gemini_timeout: float = 30.0

    # ===== Ollama Configuration =====
    ollama_url: str = "http://127.0.0.1:11434"
    ollama_model: str = "llama3"
    ollama_llm_timeout: float = 120.0  # LLM generation timeout
    ollama_health_check_timeout: float = 2.0  # Availability probe timeout

    # ===== Circuit Breaker =====
    circuit_breaker_threshold: int = Field(default=5, ge=1)  # Failures before opening
    circuit_breaker_timeout: float = 60.0  # Recovery window (seconds)
    circuit_breaker_half_open_max_calls: int = 1  # Test calls in half-open state

    # ===== Storage =====
    database_path: str = "data/second_brain.db"  # SQLite file shared by notes and pattern runs

    # ===== Pattern Observer =====
    pattern_scheduler_enabled: bool = True
    pattern_interval_hours: float = Field(default=24.0, gt=0)
    pattern_min_gap_hours: float = Field(default=23.0, ge=0)
    pattern_startup_delay_seconds: float = Field(default=10.0, ge=0)
    timeline_timezone: str | None = None  # IANA zone for week boundaries, None = process local time

    # ===== Application Settings =====
    log_level: str = "info"
    cors_origins: str = "*"  # Comma-separated list of allowed origins

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore unknown fields from .env

    def get_fallback_chain(self) -> list[str]:
        """Get the ordered provider names for the fallback LLM provider"""
        return [name.strip() for name in self.llm_fallback_chain.split(",") if name.strip()]

    def get_cors_origins(self) -> list[str]:
        """Get allowed CORS origins as a list"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def get_llm_model(self) -> str:
        """Get LLM model name based on provider"""
        defaults = {
            "gemini": self.gemini_model,
            "ollama": self.ollama_model,
        }
        if self.llm_provider == "fallback":
            chain = self.get_fallback_chain()
            return defaults.get(chain[0], "") if chain else ""
        return defaults.get(self.llm_provider, "")


# Global settings instance
settings = Settings()
