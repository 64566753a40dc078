"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
QBO 세션과 HTTP 클라이언트는 프로세스 전역으로 하나씩 두고
라우트에는 Depends로만 전달한다 (테스트는 dependency_overrides로 교체).
"""

import logging
import secrets
import time
from collections import OrderedDict

from adapters.hedera.mirror_client import MirrorRestClient
from adapters.interfaces import IMirrorClient, IQboClient
from adapters.qbo.oauth import IntuitOAuthClient
from adapters.qbo.rest_client import QboRestClient
from adapters.qbo.session import QboSession
from core.config.loader import Settings, get_settings
from core.constants import Defaults
from sync.bootstrap import build_session

logger = logging.getLogger(__name__)


def get_app_settings() -> Settings:
    """애플리케이션 설정 반환"""
    return get_settings()


# =========================================================================
# QBO 세션 (프로세스 전역)
# =========================================================================

_session: QboSession | None = None


def get_session() -> QboSession:
    """QBO 세션 반환

    최초 호출 시 secrets.yaml의 토큰으로 초기화 (없으면 빈 세션).
    """
    global _session
    if _session is None:
        _session = build_session(get_settings().qbo)
    return _session


# =========================================================================
# OAuth state (CSRF 방지)
# =========================================================================

# state → 발급 시각 (monotonic, 발급 순)
_oauth_states: "OrderedDict[str, float]" = OrderedDict()


def _prune_oauth_states(now: float) -> None:
    """만료된 state 제거 후 상한 초과분은 오래된 것부터 제거"""
    cutoff = now - Defaults.OAUTH_STATE_TTL_SEC
    while _oauth_states:
        oldest_state, issued_at = next(iter(_oauth_states.items()))
        if issued_at > cutoff and len(_oauth_states) <= Defaults.OAUTH_STATE_MAX:
            break
        del _oauth_states[oldest_state]


def issue_oauth_state() -> str:
    """authorize URL용 state 발급

    유효기간(OAUTH_STATE_TTL_SEC)과 보관 상한(OAUTH_STATE_MAX)을 넘지 않는다.
    """
    now = time.monotonic()
    state = secrets.token_urlsafe(16)
    _oauth_states[state] = now
    _prune_oauth_states(now)
    return state


def consume_oauth_state(state: str | None) -> bool:
    """콜백 state 검증 (1회용, 만료된 state는 거부)"""
    _prune_oauth_states(time.monotonic())
    if not state or state not in _oauth_states:
        return False
    del _oauth_states[state]
    return True


# =========================================================================
# HTTP 클라이언트 (lazy, 프로세스 전역)
# =========================================================================

_oauth_client: IntuitOAuthClient | None = None
_qbo_client: QboRestClient | None = None
_mirror_client: MirrorRestClient | None = None


def get_oauth_client() -> IntuitOAuthClient:
    """Intuit OAuth 클라이언트"""
    global _oauth_client
    if _oauth_client is None:
        credentials = get_settings().qbo
        _oauth_client = IntuitOAuthClient(
            client_id=credentials.client_id,
            client_secret=credentials.client_secret,
            redirect_uri=credentials.redirect_uri,
        )
    return _oauth_client


def get_qbo_client() -> IQboClient:
    """QBO REST 클라이언트 (항상 현재 전역 세션에 바인딩)"""
    global _qbo_client
    session = get_session()
    if _qbo_client is None:
        _qbo_client = QboRestClient(session, get_settings().qbo_base_url)
    elif _qbo_client.session is not session:
        _qbo_client.session = session
    return _qbo_client


def get_mirror_client() -> IMirrorClient:
    """Mirror Node REST 클라이언트"""
    global _mirror_client
    if _mirror_client is None:
        _mirror_client = MirrorRestClient(get_settings().mirror_base_url)
    return _mirror_client


async def close_clients() -> None:
    """HTTP 클라이언트 정리 (앱 종료 시)"""
    global _oauth_client, _qbo_client, _mirror_client
    for client in (_oauth_client, _qbo_client, _mirror_client):
        if client is not None:
            await client.close()
    _oauth_client = None
    _qbo_client = None
    _mirror_client = None
    logger.info("Web: HTTP 클라이언트 종료 완료")


def reset_state() -> None:
    """전역 상태 초기화 (테스트용)"""
    global _session, _oauth_client, _qbo_client, _mirror_client
    _session = None
    _oauth_client = None
    _qbo_client = None
    _mirror_client = None
    _oauth_states.clear()
