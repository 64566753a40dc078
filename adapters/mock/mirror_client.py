"""
Mock Mirror Node 클라이언트

테스트용. IMirrorClient Protocol 준수.
"""

from adapters.hedera.models import parse_transaction
from adapters.models import MirrorTransaction
from core.domain.errors import UpstreamUnavailable


class MockMirrorClient:
    """Mock Mirror Node 클라이언트

    계정별로 트랜잭션을 등록해 두고 get_transactions에서 그대로 반환.

    사용 예시:
    ```python
    client = MockMirrorClient()
    client.add_raw("0.0.100", {"transaction_id": "0.0.1-1-1", ...})
    txs = await client.get_transactions("0.0.100")
    ```
    """

    def __init__(self) -> None:
        self.transactions: dict[str, list[MirrorTransaction]] = {}
        self.calls: list[tuple[str, int]] = []
        self.fail_with: UpstreamUnavailable | None = None

    def add(self, account_id: str, tx: MirrorTransaction) -> None:
        """트랜잭션 등록 (등록 순서 = 반환 순서)"""
        self.transactions.setdefault(account_id, []).append(tx)

    def add_raw(self, account_id: str, data: dict) -> MirrorTransaction:
        """원본 JSON으로 트랜잭션 등록"""
        tx = parse_transaction(data)
        self.add(account_id, tx)
        return tx

    async def get_transactions(
        self,
        account_id: str,
        limit: int = 25,
    ) -> list[MirrorTransaction]:
        """등록된 트랜잭션 반환"""
        self.calls.append((account_id, limit))
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.transactions.get(account_id, []))[:limit]

    async def close(self) -> None:
        """리소스 정리 (없음)"""
        return None
