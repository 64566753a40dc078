"""
Intuit OAuth2 클라이언트

authorize URL 생성, authorization code → 토큰 교환, 토큰 갱신.
"""

import logging
from typing import Any
from urllib.parse import urlencode

import httpx

from adapters.qbo.session import QboSession, QboToken
from core.constants import Defaults, QboEndpoints
from core.domain.errors import SessionInvalid, UpstreamUnavailable

logger = logging.getLogger(__name__)


class IntuitOAuthClient:
    """Intuit OAuth2 (Authorization Code Flow)

    Args:
        client_id: 앱 Client ID
        client_secret: 앱 Client Secret
        redirect_uri: 콜백 URL
        timeout: 요청 타임아웃 (초)
    """

    DEFAULT_SCOPES = (QboEndpoints.SCOPE_ACCOUNTING, QboEndpoints.SCOPE_OPENID)

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = Defaults.HTTP_TIMEOUT_SEC,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """HTTP 클라이언트 가져오기 (lazy initialization)"""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """HTTP 클라이언트 종료"""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def authorize_url(
        self,
        state: str,
        scopes: tuple[str, ...] = DEFAULT_SCOPES,
    ) -> str:
        """사용자 동의 페이지 URL"""
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "scope": " ".join(scopes),
            "redirect_uri": self.redirect_uri,
            "state": state,
        }
        return f"{QboEndpoints.AUTHORIZE_URL}?{urlencode(params)}"

    async def _token_request(self, form: dict[str, str]) -> dict[str, Any]:
        """토큰 엔드포인트 호출

        Raises:
            SessionInvalid: 4xx (잘못된 code / 만료된 refresh token)
            UpstreamUnavailable: 전송 오류, 5xx
        """
        client = await self._get_client()
        try:
            response = await client.post(
                QboEndpoints.TOKEN_URL,
                data=form,
                auth=(self.client_id, self.client_secret),
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Intuit token request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {"raw": response.text}
        if not isinstance(body, dict):
            body = {"raw": body}

        if 400 <= response.status_code < 500:
            raise SessionInvalid(
                f"Intuit token request rejected: {body.get('error', response.status_code)}",
                payload=body,
            )
        if not 200 <= response.status_code < 300:
            raise UpstreamUnavailable(
                f"Intuit token endpoint HTTP {response.status_code}",
                status_code=response.status_code,
                payload=body,
            )
        return body

    async def exchange_code(self, code: str, realm_id: str) -> QboToken:
        """authorization code → 토큰"""
        body = await self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
            }
        )
        logger.info(f"OAuth 토큰 발급 완료: realm={realm_id}")
        return QboToken.from_response(body, realm_id=realm_id)

    async def refresh(self, token: QboToken) -> QboToken:
        """refresh token으로 갱신 (realm 유지)

        Web 동기화 전 refresh_if_expired에서 호출. CLI는 secrets.yaml 토큰을 그대로 사용.
        """
        if not token.refresh_token:
            raise SessionInvalid("Token has no refresh_token")

        body = await self._token_request(
            {
                "grant_type": "refresh_token",
                "refresh_token": token.refresh_token,
            }
        )
        logger.info(f"OAuth 토큰 갱신 완료: realm={token.realm_id}")
        return QboToken.from_response(body, realm_id=token.realm_id)


async def refresh_if_expired(session: QboSession, oauth: IntuitOAuthClient) -> bool:
    """만료된 세션 토큰을 refresh token으로 갱신

    Web 동기화 실행 직전에 호출. 만료 시각을 모르는 토큰(CLI의 secrets.yaml 토큰)은
    갱신하지 않으며, 갱신 실패는 SessionInvalid / UpstreamUnavailable로 전파.

    Returns:
        갱신했는지 여부
    """
    token = session.token
    if token is None or not token.is_expired:
        return False

    logger.info(f"QBO 토큰 만료, 갱신 시도: realm={token.realm_id}")
    session.set_token(await oauth.refresh(token))
    return True
