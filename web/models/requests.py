"""
요청 스키마 (Pydantic)
"""

from pydantic import BaseModel, Field


class SyncRequest(BaseModel):
    """동기화 실행 요청"""

    account: str | None = Field(default=None, description="대상 Hedera 계정 (기본: 설정값)")
    limit: int | None = Field(default=None, ge=1, le=100, description="Mirror Node 조회 개수")
