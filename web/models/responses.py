"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화
"""

from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    mode: str = Field(..., description="QBO 환경 (sandbox/production)")
    authenticated: bool = Field(..., description="QBO 토큰 보유 여부")
    version: str = Field(..., description="애플리케이션 버전")


class IndexResponse(BaseModel):
    """인증 시작 안내 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    authorize_url: str = Field(..., description="Intuit 동의 페이지 URL")
    endpoints: dict[str, str] = Field(default_factory=dict, description="주요 엔드포인트")
    mirror: str = Field(..., description="Mirror Node REST URL")
    tracked_accounts: list[str] = Field(default_factory=list, description="추적 Hedera 계정")


class CallbackResponse(BaseModel):
    """OAuth 콜백 응답"""

    realm_id: str = Field(..., description="연결된 회사 ID")
    realm_changed: bool = Field(..., description="이전과 다른 회사로 변경되었는지 여부")
    expires_at: str | None = Field(default=None, description="access token 만료 시각 (UTC)")


class RealmDebugResponse(BaseModel):
    """세션 realm 디버그 응답"""

    bound_realm_id: str | None = Field(default=None, description="세션에 바인딩된 회사 ID")
    token_realm_id: str | None = Field(default=None, description="토큰의 회사 ID")
    has_token: bool = Field(..., description="토큰 보유 여부")
    expired: bool | None = Field(default=None, description="토큰 만료 여부")


class SyncOutcomeResponse(BaseModel):
    """트랜잭션별 동기화 결과"""

    status: str = Field(..., description="CREATED / SKIPPED_DUPLICATE_LOCAL / SKIPPED_DUPLICATE_REMOTE / FAILED")
    key: str = Field(..., description="idempotency key")
    transaction_id: str = Field(..., description="Hedera 트랜잭션 ID")
    consensus_timestamp: str = Field(..., description="합의 타임스탬프")
    type: str | None = Field(default=None, description="Deposit / Transfer")
    from_: str | None = Field(default=None, alias="from", description="출발")
    to: str | None = Field(default=None, description="도착")
    hbar: str | None = Field(default=None, description="HBAR 금액")
    txn_date: str | None = Field(default=None, description="거래일 (UTC)")
    record_id: str | None = Field(default=None, description="생성된 QBO Id")
    error: dict[str, Any] | None = Field(default=None, description="구조화된 에러")

    model_config = {"populate_by_name": True}


class SyncReportResponse(BaseModel):
    """동기화 배치 결과"""

    target_account: str = Field(..., description="대상 Hedera 계정")
    mirror: str = Field(default="", description="Mirror Node REST URL")
    created: int = Field(..., description="생성 건수")
    skipped: int = Field(..., description="중복으로 건너뛴 건수")
    failed: int = Field(..., description="실패 건수")
    started_at: str = Field(..., description="시작 시각 (UTC)")
    finished_at: str | None = Field(default=None, description="종료 시각 (UTC)")
    results: list[SyncOutcomeResponse] = Field(default_factory=list, description="트랜잭션별 결과")


class RecordListResponse(BaseModel):
    """QBO 레코드 목록 응답"""

    kind: str = Field(..., description="Account / Deposit / Transfer")
    count: int = Field(..., description="행 개수")
    rows: list[dict[str, Any]] = Field(default_factory=list, description="표시용 행")


class ErrorResponse(BaseModel):
    """구조화된 에러 응답"""

    detail: dict[str, Any] = Field(..., description="kind / message / payload")
