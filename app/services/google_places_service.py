"""Google Places API 서비스 구현."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import urlencode

import requests

from app.core.config import Settings, get_settings
from app.core.logger import get_logger
from app.core.timeout_policy import get_timeout_policy, to_requests_timeout
from app.schemas.place import DEFAULT_RADIUS_METERS, Location, PlacePhoto, PlaceSummary
from app.services.places_service import PlacesServiceProtocol

logger = get_logger(__name__)

_OK_STATUSES = {"OK", "ZERO_RESULTS"}


class GooglePlacesError(RuntimeError):
    """Google Places 호출 실패(네트워크 오류, 응답 파싱 실패) 시 발생하는 예외."""


class GooglePlacesHTTPError(GooglePlacesError):
    """Google Places가 2xx 이외의 상태를 반환한 경우."""

    def __init__(self, status_code: int, body: Any) -> None:
        super().__init__(f"Google Places API error {status_code}")
        self.status_code = status_code
        self.body = body


def _first_photo(raw_photos: Any) -> list[PlacePhoto]:
    if not isinstance(raw_photos, list) or not raw_photos:
        return []
    photo = raw_photos[0] or {}
    return [
        PlacePhoto(
            reference=photo.get("photo_reference"),
            width=photo.get("width"),
            height=photo.get("height"),
        )
    ]


def map_place_summary(raw: dict[str, Any]) -> PlaceSummary:
    """업스트림 장소 레코드를 PlaceSummary로 축약합니다.

    누락되거나 거짓 값인 평점/리뷰 수/가격대는 각각 0, 0, 1로 대체합니다.
    """
    geometry = raw.get("geometry") or {}
    location = geometry.get("location")
    opening_hours = raw.get("opening_hours") or {}

    return PlaceSummary(
        id=raw.get("place_id"),
        name=raw.get("name"),
        address=raw.get("vicinity") or raw.get("formatted_address") or "",
        location=Location(**location) if isinstance(location, dict) else None,
        rating=raw.get("rating") or 0,
        userRatingsTotal=raw.get("user_ratings_total") or 0,
        priceLevel=raw.get("price_level") or 1,
        openNow=opening_hours.get("open_now"),
        types=raw.get("types") or [],
        photos=_first_photo(raw.get("photos")),
    )


class GooglePlacesService(PlacesServiceProtocol):
    """Google Places Web Service(legacy) 기반 Places 서비스."""

    _NEARBY_PATH = "/nearbysearch/json"
    _TEXT_SEARCH_PATH = "/textsearch/json"
    _DETAILS_PATH = "/details/json"
    _PHOTO_PATH = "/photo"

    DETAILS_FIELDS = "name,rating,formatted_phone_number,opening_hours,website,price_level,reviews"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://maps.googleapis.com/maps/api/place",
        timeout_seconds: int = 10,
    ) -> None:
        if not api_key:
            raise GooglePlacesError("GOOGLE_MAPS_API_KEY is not configured.")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> GooglePlacesService:
        """애플리케이션 설정으로 서비스 인스턴스를 생성합니다. 생략하면 환경 설정을 사용합니다."""
        settings = settings or get_settings()
        timeout_policy = get_timeout_policy(settings)
        return cls(
            api_key=settings.GOOGLE_MAPS_API_KEY,
            base_url=settings.GOOGLE_PLACES_BASE_URL,
            timeout_seconds=timeout_policy.google_places_timeout_seconds,
        )

    async def nearby_search(
        self,
        location: Location,
        radius: int,
        place_type: str | None = None,
        keyword: str | None = None,
    ) -> list[PlaceSummary]:
        """좌표 주변의 장소를 검색합니다."""
        params: dict[str, Any] = {"location": location.to_param(), "radius": radius}
        if place_type:
            params["type"] = place_type
        if keyword:
            params["keyword"] = keyword

        data = await self._get(self._NEARBY_PATH, params)
        places = [map_place_summary(item) for item in data.get("results") or []]
        logger.info("Google Places nearby search completed: radius=%s count=%d", radius, len(places))
        return places

    async def text_search(
        self,
        query: str,
        location: Location | None = None,
        radius: int | None = None,
    ) -> list[PlaceSummary]:
        """자유 텍스트로 장소를 검색합니다. 좌표가 있으면 반경과 함께 전달합니다."""
        params: dict[str, Any] = {"query": query}
        if location is not None:
            params["location"] = location.to_param()
            params["radius"] = radius or DEFAULT_RADIUS_METERS

        data = await self._get(self._TEXT_SEARCH_PATH, params)
        places = [map_place_summary(item) for item in data.get("results") or []]
        logger.info("Google Places text search completed: location_bias=%s count=%d", location is not None, len(places))
        return places

    async def details(self, place_id: str) -> dict[str, Any] | None:
        """고정 필드 집합으로 장소 상세 정보를 조회합니다."""
        data = await self._get(self._DETAILS_PATH, {"place_id": place_id, "fields": self.DETAILS_FIELDS})
        return data.get("result")

    def photo_url(self, photo_reference: str, max_width: int) -> str:
        """API 키가 포함된 사진 URL을 조립합니다."""
        query = urlencode({"maxwidth": max_width, "photoreference": photo_reference, "key": self._api_key})
        return f"{self._base_url}{self._PHOTO_PATH}?{query}"

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        request_params = {**params, "key": self._api_key}
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _send() -> requests.Response:
            return requests.get(url, params=request_params, timeout=request_timeout)

        try:
            response = await asyncio.to_thread(_send)
            response.raise_for_status()
        except requests.HTTPError as exc:
            response = exc.response
            status_code = response.status_code if response is not None else 502
            body = _response_body(response)
            logger.error("Google Places API error: path=%s status=%s", path, status_code)
            raise GooglePlacesHTTPError(status_code, body) from exc
        except requests.RequestException as exc:
            logger.error("Google Places API request failed: path=%s error=%s", path, type(exc).__name__)
            raise GooglePlacesError("Google Places API request failed") from exc

        # requests.JSONDecodeError는 RequestException이기도 하므로 전송 오류와 분리해서 처리한다.
        try:
            data = response.json()
        except ValueError as exc:
            logger.error("Google Places API response parse failed: path=%s", path)
            raise GooglePlacesError("Google Places API returned an invalid payload") from exc

        if not isinstance(data, dict):
            raise GooglePlacesError("Google Places API returned an invalid payload")

        upstream_status = data.get("status")
        if upstream_status and upstream_status not in _OK_STATUSES:
            logger.warning(
                "Google Places API returned non-OK status: path=%s status=%s message=%s",
                path,
                upstream_status,
                data.get("error_message"),
            )
        return data


def _response_body(response: requests.Response | None) -> Any:
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text

