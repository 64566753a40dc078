"""
어댑터 공통 데이터 모델

외부 API 응답을 표준화한 도메인 모델.
금액은 Mirror Node 원본 단위(tinybar, 정수)를 그대로 유지.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class MirrorTransfer:
    """계정별 금액 항목

    Attributes:
        account: Hedera 계정 ID (예: 0.0.100)
        amount: 부호 있는 금액 (tinybar)
    """

    account: str
    amount: int


@dataclass(frozen=True)
class MirrorTransaction:
    """Mirror Node 트랜잭션 (외부 입력, 불변)

    Attributes:
        transaction_id: 트랜잭션 ID (예: 0.0.1-1700000000-000000000)
        consensus_timestamp: 합의 타임스탬프 ("초.나노초" 문자열)
        transfers: 계정별 금액 항목 (원본 순서 유지)
        name: 트랜잭션 종류 (예: CRYPTOTRANSFER)
        result: 처리 결과 (예: SUCCESS)
    """

    transaction_id: str
    consensus_timestamp: str
    transfers: tuple[MirrorTransfer, ...] = ()
    name: str = ""
    result: str = ""


@dataclass(frozen=True)
class AccountingRecordRef:
    """QBO에 생성된 레코드 참조

    Attributes:
        entity: 엔티티 이름 (Deposit, Transfer, Account)
        record_id: QBO Id
        sync_token: QBO SyncToken
        raw: 생성 응답의 엔티티 본문
    """

    entity: str
    record_id: str
    sync_token: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)
