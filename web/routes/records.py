"""
QBO 레코드 조회 API (읽기 전용)

GET /api/records/accounts  - 계정 목록 (최근 생성순)
GET /api/records/deposits  - Deposit 목록
GET /api/records/transfers - Transfer 목록
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from adapters.interfaces import IQboClient
from core.types import RecordKind
from sync.listing import list_records
from web.dependencies import get_qbo_client
from web.models.responses import RecordListResponse

router = APIRouter(prefix="/api/records", tags=["records"])

_KINDS: dict[str, RecordKind] = {
    "accounts": RecordKind.ACCOUNT,
    "deposits": RecordKind.DEPOSIT,
    "transfers": RecordKind.TRANSFER,
}


@router.get("/{kind}", response_model=RecordListResponse)
async def get_records(
    kind: str,
    limit: int | None = Query(default=None, ge=1, le=1000, description="최대 개수"),
    qbo: IQboClient = Depends(get_qbo_client),
) -> RecordListResponse:
    """레코드 목록 조회"""
    record_kind = _KINDS.get(kind)
    if record_kind is None:
        raise HTTPException(
            status_code=404,
            detail={
                "kind": "NotFound",
                "message": f"Unknown record kind: {kind}",
                "payload": {"valid": sorted(_KINDS)},
            },
        )

    rows = await list_records(qbo, record_kind, limit)
    return RecordListResponse(kind=record_kind.value, count=len(rows), rows=rows)
