"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import SyncRequest
from web.models.responses import (
    CallbackResponse,
    ErrorResponse,
    HealthResponse,
    IndexResponse,
    RealmDebugResponse,
    RecordListResponse,
    SyncOutcomeResponse,
    SyncReportResponse,
)

__all__ = [
    # Requests
    "SyncRequest",
    # Responses
    "CallbackResponse",
    "ErrorResponse",
    "HealthResponse",
    "IndexResponse",
    "RealmDebugResponse",
    "RecordListResponse",
    "SyncOutcomeResponse",
    "SyncReportResponse",
]
