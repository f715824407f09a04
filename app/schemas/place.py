"""장소 검색 릴레이 요청/응답 모델."""

from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_RADIUS_METERS = 5000
DEFAULT_PHOTO_MAX_WIDTH = 400


class Location(BaseModel):
    """위경도 좌표. 누락 여부는 라우터에서 검증합니다."""

    lat: float | None = Field(default=None, description="위도")
    lng: float | None = Field(default=None, description="경도")

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def _reject_boolean(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("coordinate must be a number")
        return value

    @property
    def is_complete(self) -> bool:
        return self.lat is not None and self.lng is not None

    def to_param(self) -> str:
        """Google Places `location` 파라미터 형식(`lat,lng`)으로 변환합니다."""
        return f"{self.lat},{self.lng}"


class NearbySearchRequest(BaseModel):
    """주변 장소 검색 요청 본문."""

    location: Location | None = Field(default=None, description="검색 중심 좌표")
    radius: int | None = Field(default=None, description="검색 반경(미터), 기본 5000")
    type: str | None = Field(default=None, description="Google 장소 유형 필터")
    keyword: str | None = Field(default=None, description="키워드 필터")


class TextSearchRequest(BaseModel):
    """텍스트 검색 요청 본문."""

    query: str | None = Field(default=None, description="검색어")
    location: Location | None = Field(default=None, description="검색 편향 좌표")
    radius: int | None = Field(default=None, description="검색 반경(미터), location과 함께만 사용")


class PlacePhoto(BaseModel):
    """대표 사진 참조."""

    reference: str | None = None
    width: int | None = None
    height: int | None = None


class PlaceSummary(BaseModel):
    """업스트림 장소 레코드의 축약 투영."""

    id: str | None = Field(default=None, description="Google place_id")
    name: str | None = None
    address: str = ""
    location: Location | None = None
    rating: float = 0
    userRatingsTotal: int = 0
    priceLevel: int = 1
    openNow: bool | None = None
    types: list[str] = Field(default_factory=list)
    photos: list[PlacePhoto] = Field(default_factory=list)


class PlaceListResponse(BaseModel):
    success: bool = True
    places: list[PlaceSummary]
    count: int


class PlaceDetailResponse(BaseModel):
    """업스트림 상세 레코드를 가공 없이 전달합니다."""

    success: bool = True
    place: dict[str, Any] | None = None


class PhotoUrlResponse(BaseModel):
    success: bool = True
    url: str
