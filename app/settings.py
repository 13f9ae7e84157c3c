from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")

    app_env: str = "dev"
    fred_api_key: str | None = None
    fred_base_url: str = "https://api.stlouisfed.org/fred"
    fred_observations_db: str = "fred_observations.db"
    upstream_timeout_seconds: float = 30.0
    host: str = "0.0.0.0"
    port: int = 9001
    cors_allow_origins: List[str] = ["*"]
    # Cache policy
    verify_left_boundary: bool = True
    refetch_on_gap: bool = True

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.fred_observations_db}"


settings = Settings()
