"""릴레이 API가 클라이언트에 반환하는 오류 유형."""

from __future__ import annotations

from typing import Any

from fastapi import status


class RelayError(Exception):
    """HTTP 상태 코드와 JSON 본문으로 변환되는 오류의 기반 클래스."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, error: str, *, status_code: int | None = None, **extra: Any) -> None:
        super().__init__(error)
        self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.extra = {key: value for key, value in extra.items() if value is not None}

    def to_content(self) -> dict[str, Any]:
        """응답 본문 딕셔너리를 생성합니다."""
        return {"error": self.error, **self.extra}


class ValidationError(RelayError):
    """필수 입력이 없거나 형식이 잘못된 경우."""

    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamError(RelayError):
    """업스트림이 2xx 이외의 상태를 반환한 경우. 상태 코드와 본문을 그대로 전달합니다."""

    def __init__(self, error: str, *, status_code: int, details: Any = None) -> None:
        super().__init__(error, status_code=status_code, details=details)


class InternalError(RelayError):
    """네트워크 실패, 예기치 않은 예외, 잘못된 업스트림 응답."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
