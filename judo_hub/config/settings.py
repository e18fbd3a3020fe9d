from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""  # anon key; queries run with the logged-in user's JWT

    # Storage
    storage_bucket: str = "judo_resources"
    signed_url_ttl_seconds: int = 60

    # Portal sessions idle longer than this are closed; the sweep runs every interval
    session_idle_ttl_seconds: int = 3600
    session_sweep_interval_seconds: int = 300

    # Password reset emails redirect back here
    app_origin: str = "http://localhost:5173"

    # Users cannot be removed from auth.users with the anon key, so "deleting" a
    # user either anonymizes the profile or drops the profile row only.
    user_deletion_policy: Literal["anonymize", "delete_profile"] = "anonymize"
    deleted_user_label: str = "Usuario eliminado"
    deleted_user_name: str = "Usuario Eliminado"

    # App
    app_name: str = "judo-hub"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    auth_rate_limit: str = "10/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
