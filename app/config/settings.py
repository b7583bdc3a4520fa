from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for admin operations: identity rollback, password change, global sign-out

    # Auth e-mails (password reset / verification links land here)
    site_url: str = "http://localhost:3000"

    # Pricing (all amounts in paise)
    gst_rate_percent: int = 18
    platform_fee_percent: int = 10
    default_studio_rental_fee: int = 20000

    # Permission resolution: "seeded" uses only materialized role_permissions rows,
    # "dynamic" also expands wildcard roles to the current action catalog
    wildcard_resolution: Literal["seeded", "dynamic"] = "seeded"

    # App
    app_name: str = "shor-dance-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:3001"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
