"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across API domains.
List endpoints return `app.utils.pagination.Page[T]`.
"""

from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for simple confirmations.
    Used for delete operations, status changes, and other actions
    that return a human-readable confirmation message.

    Attributes:
        message: 응답 메시지 (Response message string)
    """

    message: str  # 응답 메시지 (Human-readable confirmation message)


def reject_null(value: Any) -> Any:
    """부분 수정에서 NOT NULL 필드의 명시적 null 거부.

    Partial-update fields may be omitted, but an explicit null for a column
    that cannot hold one is a validation error (422).
    """
    if value is None:
        raise ValueError("may be omitted but cannot be null")
    return value
