"""FastAPI 애플리케이션 진입점."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError as SettingsValidationError
from starlette.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.api import places
from app.core.config import Settings, get_settings
from app.core.errors import RelayError
from app.core.logger import get_logger
from app.core.logging_config import configure_logging
from app.core.rate_limit import RateLimitMiddleware, SlidingWindowRateLimiter
from app.services.google_places_service import GooglePlacesService
from app.services.places_service import PlacesServiceProtocol

configure_logging()
logger = get_logger(__name__)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _resolve_docs_mode(mode: str) -> str:
    normalized = (mode or "").strip().lower()
    if normalized in {"disabled", "public"}:
        return normalized
    logger.warning("Invalid DOCS_MODE value, falling back to disabled: %s", mode)
    return "disabled"


def load_settings() -> Settings:
    """설정을 로드합니다. API 키가 없으면 프로세스를 종료합니다."""
    try:
        return get_settings()
    except SettingsValidationError as exc:
        if any(tuple(error.get("loc", ())) == ("GOOGLE_MAPS_API_KEY",) for error in exc.errors()):
            logger.error("ERROR: GOOGLE_MAPS_API_KEY not found in environment variables")
        else:
            logger.error("ERROR: invalid configuration: %s", exc)
        raise SystemExit(1) from exc


def _configure_proxy_headers(app_: FastAPI, settings: Settings) -> None:
    if not settings.PROXY_HEADERS_ENABLED:
        return

    trusted_hosts = _split_csv(settings.PROXY_TRUSTED_HOSTS) or ["127.0.0.1"]
    app_.add_middleware(ProxyHeadersMiddleware, trusted_hosts=trusted_hosts)


def _configure_cors(app_: FastAPI, settings: Settings) -> None:
    app_.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )


def _configure_rate_limit(app_: FastAPI, limiter: SlidingWindowRateLimiter | None) -> None:
    if limiter is None:
        return
    app_.add_middleware(RateLimitMiddleware, limiter=limiter, path_prefix="/api/")


def _internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def _configure_error_boundary(app_: FastAPI) -> None:
    """라우트 밖에서 발생한 예외도 CORS/보안 헤더 미들웨어 안쪽에서 500으로 변환합니다."""

    @app_.middleware("http")
    async def convert_unhandled_errors(request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return _internal_error_response(request, exc)


def _register_exception_handlers(app_: FastAPI) -> None:
    @app_.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        """릴레이 오류를 상태 코드와 `{error, ...}` 본문으로 변환합니다."""
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_content()))

    @app_.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """요청 형식 오류를 422 대신 400으로 응답합니다."""
        details = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})

    @app_.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """미들웨어 바깥에서 발생한 예외를 표준 형식으로 처리합니다."""
        return _internal_error_response(request, exc)


def create_app(
    settings: Settings | None = None,
    limiter: SlidingWindowRateLimiter | None = None,
    places_service: PlacesServiceProtocol | None = None,
) -> FastAPI:
    """설정, 리미터, Places 서비스를 주입받아 애플리케이션을 구성합니다.

    Args:
        settings: 생략하면 환경 변수에서 로드하며, API 키가 없으면 종료합니다.
        limiter: 생략하면 `RATE_LIMIT_ENABLED`일 때 설정값으로 생성합니다.
        places_service: 생략하면 같은 설정으로 `GooglePlacesService`를 생성합니다.
    """
    settings = settings or load_settings()
    configure_logging(settings.LOG_LEVEL)
    if limiter is None and settings.RATE_LIMIT_ENABLED:
        limiter = SlidingWindowRateLimiter.from_settings(settings)
    if places_service is None:
        places_service = GooglePlacesService.from_settings(settings)

    docs_mode = _resolve_docs_mode(settings.DOCS_MODE)

    @asynccontextmanager
    async def lifespan(app_: FastAPI):
        logger.info("Server running on port %s", settings.PORT)
        logger.info("Frontend URL: %s", settings.FRONTEND_URL)
        logger.info("Google Maps API Key: %s", "Loaded" if settings.GOOGLE_MAPS_API_KEY else "Missing")
        yield

    app_ = FastAPI(
        title="Places Relay",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if docs_mode == "public" else None,
        redoc_url="/redoc" if docs_mode == "public" else None,
        openapi_url="/openapi.json" if docs_mode == "public" else None,
    )
    app_.state.settings = settings
    app_.state.rate_limiter = limiter
    app_.state.places_service = places_service

    # add_middleware는 나중에 추가한 것이 바깥쪽에서 실행된다.
    _configure_error_boundary(app_)
    _configure_rate_limit(app_, limiter)
    _configure_cors(app_, settings)
    _configure_proxy_headers(app_, settings)
    _register_exception_handlers(app_)

    app_.include_router(places.router)

    @app_.middleware("http")
    async def add_security_headers(request: Request, call_next) -> Response:
        """기본 보안 헤더를 응답에 추가합니다."""
        response = await call_next(request)
        if not settings.SECURITY_HEADERS_ENABLED:
            return response

        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        response.headers.setdefault("Cache-Control", "no-store")
        return response

    @app_.get("/")
    def health_check() -> dict:
        """헬스 체크 엔드포인트."""
        return {"status": "ok", "message": "Places relay server is running"}

    return app_


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(app, host=_settings.HOST, port=_settings.PORT, log_config=None)
