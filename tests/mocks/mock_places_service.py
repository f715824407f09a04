"""Google Places API Mock 서비스.

실제 API 호출 없이 샘플 데이터를 반환하고, 호출 내역을 기록한다.
엔드포인트 테스트에서 `dependency_overrides`로 주입해 사용한다.
"""

from typing import Any

from app.schemas.place import Location, PlaceSummary
from app.services.google_places_service import map_place_summary
from app.services.places_service import PlacesServiceProtocol


class MockGooglePlacesService(PlacesServiceProtocol):
    """Mock Google Places 서비스.

    `raw_results`는 업스트림 `results` 형식의 레코드이며, 실제 서비스와 같은 매퍼로 축약한다.
    `error`가 설정되면 모든 비동기 호출에서 해당 예외를 발생시킨다.
    """

    _SAMPLE_RESULTS: list[dict[str, Any]] = [
        {
            "place_id": "ChIJ8T1GpMGOGGARDYGSgpooDWw",
            "name": "Senso-ji",
            "vicinity": "2-3-1 Asakusa, Taito City",
            "geometry": {"location": {"lat": 35.7148, "lng": 139.7967}},
            "rating": 4.6,
            "user_ratings_total": 89542,
            "price_level": 2,
            "opening_hours": {"open_now": True},
            "types": ["tourist_attraction", "place_of_worship"],
            "photos": [
                {"photo_reference": "photo-a", "width": 4032, "height": 3024},
                {"photo_reference": "photo-b", "width": 1024, "height": 768},
                {"photo_reference": "photo-c", "width": 800, "height": 600},
            ],
        },
        {
            "place_id": "ChIJN1t_tDeuEmsRUsoyG83frY4",
            "name": "Nakamise Shopping Street",
            "formatted_address": "1-36-3 Asakusa, Taito City, Tokyo",
            "geometry": {"location": {"lat": 35.7122, "lng": 139.7947}},
        },
    ]

    _SAMPLE_DETAIL: dict[str, Any] = {
        "name": "Senso-ji",
        "rating": 4.6,
        "formatted_phone_number": "03-3842-0181",
        "opening_hours": {"open_now": True, "weekday_text": ["Monday: 6:00 AM - 5:00 PM"]},
        "website": "https://www.senso-ji.jp/",
        "reviews": [{"author_name": "A", "rating": 5, "text": "Beautiful temple"}],
    }

    def __init__(
        self,
        raw_results: list[dict[str, Any]] | None = None,
        detail: dict[str, Any] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.raw_results = self._SAMPLE_RESULTS if raw_results is None else raw_results
        self.detail = self._SAMPLE_DETAIL if detail is None else detail
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def _record(self, name: str, **kwargs: Any) -> None:
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error

    async def nearby_search(
        self,
        location: Location,
        radius: int,
        place_type: str | None = None,
        keyword: str | None = None,
    ) -> list[PlaceSummary]:
        self._record("nearby_search", location=location, radius=radius, place_type=place_type, keyword=keyword)
        return [map_place_summary(item) for item in self.raw_results]

    async def text_search(
        self,
        query: str,
        location: Location | None = None,
        radius: int | None = None,
    ) -> list[PlaceSummary]:
        self._record("text_search", query=query, location=location, radius=radius)
        return [map_place_summary(item) for item in self.raw_results]

    async def details(self, place_id: str) -> dict[str, Any] | None:
        self._record("details", place_id=place_id)
        return self.detail

    def photo_url(self, photo_reference: str, max_width: int) -> str:
        self.calls.append(("photo_url", {"photo_reference": photo_reference, "max_width": max_width}))
        return (
            "https://maps.googleapis.com/maps/api/place/photo"
            f"?maxwidth={max_width}&photoreference={photo_reference}&key=test-maps-key"
        )
