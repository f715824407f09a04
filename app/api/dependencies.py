"""API 의존성 모음."""

from fastapi import Request

from app.services.places_service import PlacesServiceProtocol


def get_places_service(request: Request) -> PlacesServiceProtocol:
    """애플리케이션에 등록된 Places 서비스를 제공합니다. 테스트에서는 `dependency_overrides`로 교체합니다."""
    return request.app.state.places_service
