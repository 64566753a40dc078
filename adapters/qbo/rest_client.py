"""
QuickBooks Online REST API 클라이언트

쿼리 / 엔티티 생성 / 회사 정보 조회.
IQboClient Protocol 준수.

에러 변환:
- 응답 본문에 Fault → BackendRejected (HTTP 200이어도 동일)
- 401 → SessionInvalid
- 전송 오류, 기타 비 2xx → UpstreamUnavailable
"""

import logging
from typing import Any

import httpx

from adapters.qbo.session import QboSession
from core.constants import Defaults, QboEndpoints
from core.domain.errors import BackendRejected, SessionInvalid, UpstreamUnavailable

logger = logging.getLogger(__name__)


def extract_fault(body: Any) -> dict[str, Any] | None:
    """응답 본문에서 Fault 추출 (없으면 None)"""
    if not isinstance(body, dict):
        return None
    fault = body.get("Fault") or body.get("fault")
    if fault:
        return fault
    return None


def describe_fault(fault: dict[str, Any]) -> str:
    """Fault를 한 줄 메시지로 요약"""
    errors = fault.get("Error") or []
    parts = []
    for error in errors:
        message = error.get("Message", "")
        detail = error.get("Detail", "")
        code = error.get("code", "")
        parts.append(f"[{code}] {message}: {detail}".strip())
    fault_type = fault.get("type", "Fault")
    if not parts:
        return fault_type
    return f"{fault_type}: " + "; ".join(parts)


class QboRestClient:
    """QBO REST API 클라이언트

    모든 호출 전에 session.require_realm()으로 회사 컨텍스트 검증.

    Args:
        session: QBO 세션 컨텍스트
        base_url: API 베이스 URL (sandbox / production)
        minor_version: QBO minorversion 파라미터
        timeout: 요청 타임아웃 (초)
    """

    def __init__(
        self,
        session: QboSession,
        base_url: str,
        minor_version: int = QboEndpoints.MINOR_VERSION,
        timeout: float = Defaults.HTTP_TIMEOUT_SEC,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.minor_version = minor_version
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

    async def _request(
        self,
        method: str,
        resource: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """API 요청 실행

        Args:
            method: HTTP 메서드
            resource: company 하위 경로 (예: query, deposit)
            params: 쿼리 파라미터 (minorversion은 자동 추가)
            json_body: 요청 본문

        Returns:
            JSON 응답

        Raises:
            SessionInvalid: 세션 없음 / realm 불일치 / 401
            BackendRejected: Fault 응답
            UpstreamUnavailable: 전송 오류, 비 2xx
        """
        realm_id = self.session.require_realm()
        token = self.session.token
        assert token is not None

        url = f"{self.base_url}/v3/company/{realm_id}/{resource}"
        request_params = dict(params) if params else {}
        request_params["minorversion"] = self.minor_version
        headers = {
            "Authorization": f"Bearer {token.access_token}",
            "Accept": "application/json",
        }
        if json_body is not None:
            headers["Content-Type"] = "application/json"

        client = await self._get_client()

        try:
            response = await client.request(
                method,
                url,
                params=request_params,
                json=json_body,
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error(
                "QBO 요청 실패",
                extra={"resource": resource, "error": str(e)},
            )
            raise UpstreamUnavailable(f"QBO request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        fault = extract_fault(body)

        if response.status_code == 401:
            raise SessionInvalid(
                "QBO rejected the access token (401). Re-authorize.",
                payload=fault or response.text,
            )

        if fault is not None:
            message = describe_fault(fault)
            logger.warning(
                f"QBO Fault: {message}",
                extra={"resource": resource, "status_code": response.status_code},
            )
            raise BackendRejected(message, payload=fault)

        if not 200 <= response.status_code < 300:
            raise UpstreamUnavailable(
                f"QBO HTTP {response.status_code}",
                status_code=response.status_code,
                payload=body if body is not None else response.text,
            )

        if not isinstance(body, dict):
            raise UpstreamUnavailable(
                "QBO returned invalid JSON",
                status_code=response.status_code,
                payload=response.text,
            )

        return body

    # -------------------------------------------------------------------------
    # 조회
    # -------------------------------------------------------------------------

    async def query(self, statement: str) -> dict[str, Any]:
        """쿼리 실행

        Args:
            statement: QBO 쿼리 (예: select Id from Deposit where ...)

        Returns:
            QueryResponse 본문 (결과 없으면 빈 dict)
        """
        logger.debug(f"QBO query: {statement}")
        body = await self._request("GET", "query", params={"query": statement})
        return body.get("QueryResponse") or {}

    async def get_company_info(self) -> dict[str, Any]:
        """회사 정보 조회"""
        realm_id = self.session.require_realm()
        return await self._request("GET", f"companyinfo/{realm_id}")

    # -------------------------------------------------------------------------
    # 생성
    # -------------------------------------------------------------------------

    async def create(self, entity: str, payload: dict[str, Any]) -> dict[str, Any]:
        """엔티티 생성

        Args:
            entity: 엔티티 이름 (Account, Deposit, Transfer)
            payload: 엔티티별 JSON 본문

        Returns:
            생성된 엔티티 본문

        Raises:
            BackendRejected: Fault 응답 또는 응답에 엔티티 없음
        """
        body = await self._request("POST", entity.lower(), json_body=payload)

        created = body.get(entity)
        if not isinstance(created, dict):
            raise BackendRejected(
                f"QBO create response did not contain {entity}",
                payload=body,
            )

        logger.info(
            f"QBO {entity} 생성: Id={created.get('Id')}",
            extra={"entity": entity, "id": created.get("Id")},
        )
        return created
