"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Pre-configured HTTPException subclasses raised from services so call sites
never spell out status codes.

Usage:
    from app.utils.exceptions import NotFoundError, DuplicateError
    raise NotFoundError("Post not found")
    raise DuplicateError("Username already exists")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found — 요청한 리소스(글, 테마, 사용자 등)가 없을 때.

    Raised when a requested resource (post, theme, user, etc.) does not exist.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict — 고유 제약 위반 시 (duplicate username, theme id, ...)."""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden — 권한 부족 또는 비활성 계정.

    Raised when the authenticated user lacks the required role level,
    or when an inactive/banned account tries to log in.
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized — 인증 누락/만료/실패 (missing, expired or invalid credentials)."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request — Pydantic 검증 이후의 비즈니스 규칙 위반.

    Raised for business rule failures beyond schema validation
    (e.g. disallowed file type, activating a disabled theme, unsafe ZIP archive).
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class PayloadTooLargeError(HTTPException):
    """413 Payload Too Large — 업로드 파일 크기 초과 (Upload exceeds UPLOAD_MAX_SIZE)."""

    def __init__(self, detail: str = "File too large") -> None:
        super().__init__(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=detail)
