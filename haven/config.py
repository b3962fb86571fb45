"""Application configuration from environment."""
from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root (parent of haven/); .env is loaded from here so it works regardless of CWD
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini (either key name works; the first non-empty one of GEMINI_API_KEY, GOOGLE_AI_API_KEY wins)
    gemini_api_key: str = Field(default="", validation_alias="GEMINI_API_KEY")
    google_ai_api_key: str = Field(default="", validation_alias="GOOGLE_AI_API_KEY")
    gemini_text_model: str = "gemini-2.0-flash"
    gemini_reasoning_model: str = "gemini-1.5-pro"
    gemini_embedding_model: str = "text-embedding-004"

    # Database (Supabase: use Connection string from Supabase Dashboard → Settings → Database)
    database_url: str = ""

    # Supabase project URL and service key (match_assets RPC lives in the same Postgres)
    supabase_url: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    )
    supabase_key: str = Field(
        default="",
        validation_alias=AliasChoices("SUPABASE_SERVICE_KEY", "SUPABASE_KEY", "SUPABASE_ANON_KEY"),
    )

    # Web research
    tavily_api_key: str = ""
    tavily_search_url: str = "https://api.tavily.com/search"

    @property
    def database_url_sync(self) -> str:
        """Sync URL for tooling that cannot use asyncpg."""
        if not self.database_url:
            return ""
        return self.database_url.replace("+asyncpg", "") if "+asyncpg" in self.database_url else self.database_url

    # Canvas
    canvas_storage_path: str = "./storage/canvas"

    # Jobs
    lifecycle_sweep_hours: int = 24
    quiz_timeout_seconds: float = 60.0

    # App
    log_level: str = "INFO"

    @model_validator(mode="after")
    def resolve_gemini_key(self) -> "Settings":
        if not self.gemini_api_key.strip():
            self.gemini_api_key = self.google_ai_api_key.strip()
        return self

    @property
    def canvas_storage_dir(self) -> Path:
        p = Path(self.canvas_storage_path)
        p.mkdir(parents=True, exist_ok=True)
        return p


settings = Settings()
