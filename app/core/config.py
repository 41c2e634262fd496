from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "form-builder"
    APP_VERSION: str = "0.1.0"
    # Swagger UI at /docs and /redoc; usually off in production.
    EXPOSE_DOCS: bool = True

    # Editor origins allowed to call the rules API.
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    LOG_LEVEL: str = "INFO"
    # Load balancers poll /health every few seconds.
    LOG_HEALTH_CHECKS: bool = False
    # Raw submission payloads may carry personal data; keep off outside local debugging.
    LOG_SUBMISSION_PAYLOADS: bool = False

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def docs_urls(self) -> dict:
        if not self.EXPOSE_DOCS:
            return {"docs_url": None, "redoc_url": None, "openapi_url": None}
        return {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}

settings = Settings()
