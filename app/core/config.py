"""애플리케이션 전역 설정을 관리하는 모듈."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """환경 변수 기반 설정 모델."""

    GOOGLE_MAPS_API_KEY: str
    GOOGLE_PLACES_BASE_URL: str = "https://maps.googleapis.com/maps/api/place"
    GOOGLE_PLACES_TIMEOUT_SECONDS: int = 10
    FRONTEND_URL: str = "http://localhost:3000"
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_MAX_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    DOCS_MODE: str = "disabled"
    SECURITY_HEADERS_ENABLED: bool = True
    PROXY_HEADERS_ENABLED: bool = True
    PROXY_TRUSTED_HOSTS: str = "127.0.0.1"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("GOOGLE_MAPS_API_KEY")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("GOOGLE_MAPS_API_KEY must not be blank")
        return stripped

    @field_validator("RATE_LIMIT_MAX_REQUESTS", "RATE_LIMIT_WINDOW_SECONDS", mode="before")
    @classmethod
    def _clamp_rate_limit(cls, value: object) -> int:
        try:
            numeric = int(value)
        except (TypeError, ValueError):
            return 1
        return max(1, numeric)


@lru_cache
def get_settings() -> Settings:
    """Settings 인스턴스를 반환한다. 최초 호출 시에만 생성되고 이후 캐싱된다."""
    return Settings()
