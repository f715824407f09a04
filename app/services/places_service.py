"""Places 서비스 추상 프로토콜 정의."""

from abc import ABC, abstractmethod
from typing import Any

from app.schemas.place import Location, PlaceSummary


class PlacesServiceProtocol(ABC):
    """업스트림 Places API 호출을 위한 인터페이스를 정의합니다."""

    @abstractmethod
    async def nearby_search(
        self,
        location: Location,
        radius: int,
        place_type: str | None = None,
        keyword: str | None = None,
    ) -> list[PlaceSummary]:
        """좌표 주변의 장소를 검색합니다.

        Args:
            location: 검색 중심 좌표
            radius: 검색 반경(미터)
            place_type: Google 장소 유형 필터
            keyword: 키워드 필터

        Returns:
            축약된 장소 목록
        """
        raise NotImplementedError

    @abstractmethod
    async def text_search(
        self,
        query: str,
        location: Location | None = None,
        radius: int | None = None,
    ) -> list[PlaceSummary]:
        """자유 텍스트로 장소를 검색합니다."""
        raise NotImplementedError

    @abstractmethod
    async def details(self, place_id: str) -> dict[str, Any] | None:
        """장소 상세 정보를 조회합니다.

        Args:
            place_id: Google Places ID

        Returns:
            업스트림 `result` 객체(가공 없음) 또는 None
        """
        raise NotImplementedError

    @abstractmethod
    def photo_url(self, photo_reference: str, max_width: int) -> str:
        """사진 URL을 조립합니다. 네트워크 호출을 하지 않습니다."""
        raise NotImplementedError
