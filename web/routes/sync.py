"""
동기화 실행 API

POST /api/sync              - 동기화 1회 실행 (body: account, limit)
GET  /api/sync?account=...  - 동일 (브라우저에서 바로 실행)

트랜잭션 단위 실패는 결과의 FAILED 항목으로 반환되고,
세션/준비 단계 실패만 에러 응답으로 변환된다.
"""

import logging

from fastapi import APIRouter, Depends, Query

from adapters.interfaces import IMirrorClient, IQboClient
from adapters.qbo.oauth import IntuitOAuthClient, refresh_if_expired
from adapters.qbo.session import QboSession
from core.config.loader import Settings
from sync.bootstrap import build_runner
from web.dependencies import (
    get_app_settings,
    get_mirror_client,
    get_oauth_client,
    get_qbo_client,
    get_session,
)
from web.models.requests import SyncRequest
from web.models.responses import SyncReportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sync", tags=["sync"])


async def _run(
    account: str | None,
    limit: int | None,
    settings: Settings,
    session: QboSession,
    mirror: IMirrorClient,
    qbo: IQboClient,
    oauth: IntuitOAuthClient,
) -> SyncReportResponse:
    await refresh_if_expired(session, oauth)
    runner = build_runner(settings, session, mirror, qbo)
    report = await runner.run(account or settings.target_account, limit=limit)
    return SyncReportResponse.model_validate(report.to_dict())


@router.post("", response_model=SyncReportResponse)
async def run_sync(
    request: SyncRequest | None = None,
    settings: Settings = Depends(get_app_settings),
    session: QboSession = Depends(get_session),
    mirror: IMirrorClient = Depends(get_mirror_client),
    qbo: IQboClient = Depends(get_qbo_client),
    oauth: IntuitOAuthClient = Depends(get_oauth_client),
) -> SyncReportResponse:
    """동기화 실행"""
    request = request or SyncRequest()
    return await _run(request.account, request.limit, settings, session, mirror, qbo, oauth)


@router.get("", response_model=SyncReportResponse)
async def run_sync_get(
    account: str | None = Query(default=None, description="대상 Hedera 계정"),
    limit: int | None = Query(default=None, ge=1, le=100, description="Mirror Node 조회 개수"),
    settings: Settings = Depends(get_app_settings),
    session: QboSession = Depends(get_session),
    mirror: IMirrorClient = Depends(get_mirror_client),
    qbo: IQboClient = Depends(get_qbo_client),
    oauth: IntuitOAuthClient = Depends(get_oauth_client),
) -> SyncReportResponse:
    """동기화 실행 (GET)"""
    return await _run(account, limit, settings, session, mirror, qbo, oauth)
