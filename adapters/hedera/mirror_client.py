"""
Hedera Mirror Node REST 클라이언트

계정별 최근 트랜잭션 조회 (읽기 전용).
IMirrorClient Protocol 준수.
"""

import logging
from typing import Any

import httpx

from adapters.hedera.models import parse_transactions_response
from adapters.models import MirrorTransaction
from core.constants import Defaults
from core.domain.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class MirrorRestClient:
    """Mirror Node REST API 클라이언트

    비 2xx 응답과 전송 오류는 모두 UpstreamUnavailable로 변환.
    배치 단위로 치명적 오류이므로 재시도하지 않음.

    Args:
        base_url: REST API 베이스 URL (예: https://testnet.mirrornode.hedera.com/api/v1)
        timeout: 요청 타임아웃 (초)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = Defaults.HTTP_TIMEOUT_SEC,
    ):
        self.base_url = base_url.rstrip("/")
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

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET 요청 실행

        Raises:
            UpstreamUnavailable: 전송 오류 또는 비 2xx 응답
        """
        url = f"{self.base_url}{path}"
        client = await self._get_client()

        try:
            response = await client.get(
                url,
                params=params,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(
                "Mirror Node 요청 실패",
                extra={"path": path, "error": str(e)},
            )
            raise UpstreamUnavailable(f"Mirror node request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise UpstreamUnavailable(
                f"Mirror node HTTP {response.status_code}",
                status_code=response.status_code,
                payload=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamUnavailable(
                "Mirror node returned invalid JSON",
                status_code=response.status_code,
                payload=response.text,
            ) from e

    async def get_transactions(
        self,
        account_id: str,
        limit: int = Defaults.PAGE_SIZE,
    ) -> list[MirrorTransaction]:
        """계정의 최근 트랜잭션 조회 (최신순, 1 페이지)

        Args:
            account_id: Hedera 계정 ID
            limit: 조회 개수

        Returns:
            MirrorTransaction 목록 (API 반환 순서 유지)
        """
        data = await self._get(
            "/transactions",
            params={"account.id": account_id, "limit": limit},
        )
        transactions = parse_transactions_response(data)

        logger.info(
            f"Mirror Node 트랜잭션 조회: {account_id} ({len(transactions)}건)",
            extra={"account": account_id, "limit": limit},
        )
        return transactions
