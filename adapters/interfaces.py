"""
어댑터 인터페이스 정의

Protocol 기반으로 정의하여 의존성 주입 및 Mock 교체 가능.
모든 구현체는 이 Protocol을 준수해야 함.
"""

from typing import Any, Protocol, runtime_checkable

from adapters.models import MirrorTransaction


@runtime_checkable
class IMirrorClient(Protocol):
    """Mirror Node 조회 클라이언트 인터페이스"""

    async def get_transactions(
        self,
        account_id: str,
        limit: int = 25,
    ) -> list[MirrorTransaction]:
        """계정의 최근 트랜잭션 조회

        Args:
            account_id: Hedera 계정 ID
            limit: 조회 개수

        Returns:
            트랜잭션 목록 (최신순)

        Raises:
            UpstreamUnavailable: 조회 실패
        """
        ...

    async def close(self) -> None:
        """리소스 정리"""
        ...


@runtime_checkable
class IQboClient(Protocol):
    """QBO 클라이언트 인터페이스

    쿼리 언어는 TxnDate 등 일부 필드만 필터로 신뢰 가능.
    """

    async def query(self, statement: str) -> dict[str, Any]:
        """쿼리 실행

        Returns:
            QueryResponse 본문 ({엔티티 이름: [레코드...]} 형태)

        Raises:
            BackendRejected: Fault 응답
            UpstreamUnavailable: 전송 오류
        """
        ...

    async def create(self, entity: str, payload: dict[str, Any]) -> dict[str, Any]:
        """엔티티 생성

        Returns:
            생성된 엔티티 본문

        Raises:
            BackendRejected: Fault 응답
        """
        ...

    async def get_company_info(self) -> dict[str, Any]:
        """회사 정보 조회"""
        ...

    async def close(self) -> None:
        """리소스 정리"""
        ...
