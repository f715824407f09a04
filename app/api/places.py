"""장소 검색 릴레이 엔드포인트 정의."""

from fastapi import APIRouter, Body, Depends, Query

from app.api.dependencies import get_places_service
from app.core.errors import InternalError, UpstreamError, ValidationError
from app.core.logger import get_logger
from app.schemas.place import (
    DEFAULT_PHOTO_MAX_WIDTH,
    DEFAULT_RADIUS_METERS,
    NearbySearchRequest,
    PhotoUrlResponse,
    PlaceDetailResponse,
    PlaceListResponse,
    TextSearchRequest,
)
from app.services.google_places_service import GooglePlacesHTTPError
from app.services.places_service import PlacesServiceProtocol

router = APIRouter(prefix="/api/places", tags=["places"])
logger = get_logger(__name__)

_INVALID_LOCATION = "Invalid location data. Please provide lat and lng."


@router.post("/nearby", response_model=PlaceListResponse)
async def nearby_search(
    request: NearbySearchRequest | None = Body(default=None),  # noqa: B008
    places_service: PlacesServiceProtocol = Depends(get_places_service),  # noqa: B008
) -> PlaceListResponse:
    """좌표 주변 장소를 검색하여 축약된 목록을 반환합니다.

    업스트림이 2xx 이외의 상태로 응답하면 해당 상태 코드와 본문을 그대로 전달합니다.
    """
    request = request or NearbySearchRequest()
    if request.location is None or not request.location.is_complete:
        raise ValidationError(_INVALID_LOCATION)

    try:
        places = await places_service.nearby_search(
            location=request.location,
            radius=request.radius or DEFAULT_RADIUS_METERS,
            place_type=request.type,
            keyword=request.keyword,
        )
    except GooglePlacesHTTPError as exc:
        logger.error("Error fetching places: upstream status=%s", exc.status_code)
        raise UpstreamError(
            "Failed to fetch places from Google",
            status_code=exc.status_code,
            details=exc.body,
        ) from exc
    except Exception as exc:
        logger.error("Error fetching places: %s", exc)
        raise InternalError("Internal server error", message="Failed to fetch nearby places") from exc

    return PlaceListResponse(places=places, count=len(places))


@router.get("/details/", response_model=PlaceDetailResponse, include_in_schema=False)
@router.get("/details/{place_id}", response_model=PlaceDetailResponse)
async def place_details(
    place_id: str = "",
    places_service: PlacesServiceProtocol = Depends(get_places_service),  # noqa: B008
) -> PlaceDetailResponse:
    """장소 상세 정보를 업스트림 응답 그대로 반환합니다.

    주변 검색과 달리 업스트림 상태 코드는 전달하지 않고 모든 실패를 500으로 응답합니다.
    """
    place_id = place_id.strip()
    if not place_id:
        raise ValidationError("Place Id is required")

    try:
        place = await places_service.details(place_id)
    except Exception as exc:
        logger.error("Error fetching place details: %s", exc)
        raise InternalError("Failed to fetch place details") from exc

    return PlaceDetailResponse(place=place)


@router.get("/photo/", response_model=PhotoUrlResponse, include_in_schema=False)
@router.get("/photo/{photo_reference}", response_model=PhotoUrlResponse)
def photo_url(
    photo_reference: str = "",
    max_width: int = Query(default=DEFAULT_PHOTO_MAX_WIDTH, alias="maxWidth", ge=1, le=1600),  # noqa: B008
    places_service: PlacesServiceProtocol = Depends(get_places_service),  # noqa: B008
) -> PhotoUrlResponse:
    """사진 참조로 Google 사진 URL을 조립합니다. 업스트림 호출은 하지 않습니다."""
    photo_reference = photo_reference.strip()
    if not photo_reference:
        raise ValidationError("Photo reference is required")

    try:
        url = places_service.photo_url(photo_reference, max_width)
    except Exception as exc:
        logger.error("Error generating photo URL: %s", exc)
        raise InternalError("Failed to generate photo URL") from exc

    return PhotoUrlResponse(url=url)


@router.post("/search", response_model=PlaceListResponse)
async def text_search(
    request: TextSearchRequest | None = Body(default=None),  # noqa: B008
    places_service: PlacesServiceProtocol = Depends(get_places_service),  # noqa: B008
) -> PlaceListResponse:
    """자유 텍스트로 장소를 검색합니다."""
    request = request or TextSearchRequest()
    query = (request.query or "").strip()
    if not query:
        raise ValidationError("Search query is required")
    if request.location is not None and not request.location.is_complete:
        raise ValidationError(_INVALID_LOCATION)

    try:
        places = await places_service.text_search(
            query=query,
            location=request.location,
            radius=request.radius or DEFAULT_RADIUS_METERS,
        )
    except Exception as exc:
        logger.error("Error searching places: %s", exc)
        raise InternalError("Failed to search places") from exc

    return PlaceListResponse(places=places, count=len(places))
