"""
QBO 인증 API

GET /            - authorize URL 및 엔드포인트 안내
GET /callback    - OAuth 콜백 (code → 토큰, 회사 바인딩)
GET /debug/realm - 세션 realm 상태
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from adapters.qbo.oauth import IntuitOAuthClient
from adapters.qbo.session import QboSession
from core.config.loader import Settings
from web.dependencies import (
    consume_oauth_state,
    get_app_settings,
    get_oauth_client,
    get_session,
    issue_oauth_state,
)
from web.models.responses import CallbackResponse, IndexResponse, RealmDebugResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/", response_model=IndexResponse)
async def index(
    settings: Settings = Depends(get_app_settings),
    oauth: IntuitOAuthClient = Depends(get_oauth_client),
) -> IndexResponse:
    """authorize URL 발급"""
    return IndexResponse(
        authorize_url=oauth.authorize_url(state=issue_oauth_state()),
        endpoints={
            "callback": "/callback",
            "debug_realm": "/debug/realm",
            "company": "/api/company",
            "sync": f"/api/sync?account={settings.target_account}",
            "accounts": "/api/records/accounts",
            "deposits": "/api/records/deposits",
            "transfers": "/api/records/transfers",
        },
        mirror=settings.mirror_base_url,
        tracked_accounts=sorted(settings.tracked_accounts),
    )


@router.get("/callback", response_model=CallbackResponse)
async def oauth_callback(
    code: str | None = Query(default=None),
    realm_id: str | None = Query(default=None, alias="realmId"),
    state: str | None = Query(default=None),
    error: str | None = Query(default=None),
    session: QboSession = Depends(get_session),
    oauth: IntuitOAuthClient = Depends(get_oauth_client),
) -> CallbackResponse:
    """OAuth 콜백

    다른 회사로 연결되면 기존 토큰을 폐기하고 새 회사로 재바인딩.
    """
    if error:
        raise HTTPException(
            status_code=400,
            detail={"kind": "OAuthError", "message": error, "payload": None},
        )

    if not consume_oauth_state(state):
        raise HTTPException(
            status_code=400,
            detail={"kind": "OAuthError", "message": "Invalid OAuth state", "payload": None},
        )

    if not code or not realm_id:
        raise HTTPException(
            status_code=400,
            detail={"kind": "OAuthError", "message": "Missing code or realmId", "payload": None},
        )

    changed = session.observe_realm(realm_id)
    token = await oauth.exchange_code(code, realm_id)
    session.set_token(token)

    logger.info(
        f"OAuth 콜백 완료: realm={realm_id}",
        extra={"realm_changed": changed},
    )

    return CallbackResponse(
        realm_id=realm_id,
        realm_changed=changed,
        expires_at=token.expires_at.isoformat() if token.expires_at else None,
    )


@router.get("/debug/realm", response_model=RealmDebugResponse)
async def debug_realm(session: QboSession = Depends(get_session)) -> RealmDebugResponse:
    """세션 realm 상태"""
    return RealmDebugResponse(**session.debug_info())
