"""
회계 효과 (Deposit / Transfer)

종류별 차이는 EffectDescriptor 하나로 표현하고,
중복 확인(resolver)과 생성(writer)은 descriptor를 받는 공통 로직으로 처리.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable

from core.types import EffectKind
from core.utils.timezone import format_txn_date


@dataclass(frozen=True)
class AccountingEffect:
    """QBO에 기록할 회계 효과

    Deposit: to_account_id(지갑) ← from_account_id(Clearing)
    Transfer: from_account_id(지갑) → to_account_id(추적 지갑 또는 외부 유출)

    Attributes:
        kind: 효과 종류
        from_account_id: 출발 QBO 계정 Id
        to_account_id: 도착 QBO 계정 Id
        amount: 금액 (HBAR, 소수점 2자리)
        txn_date: 거래일 (UTC)
        key: idempotency key (PrivateNote)
        from_label: 표시용 출발 이름
        to_label: 표시용 도착 이름
    """

    kind: EffectKind
    from_account_id: str
    to_account_id: str
    amount: Decimal
    txn_date: date
    key: str
    from_label: str = ""
    to_label: str = ""

    @classmethod
    def deposit(
        cls,
        into_account_id: str,
        source_account_id: str,
        amount: Decimal,
        txn_date: date,
        key: str,
        into_label: str = "",
        source_label: str = "",
    ) -> "AccountingEffect":
        """입금 효과 생성"""
        return cls(
            kind=EffectKind.DEPOSIT,
            from_account_id=source_account_id,
            to_account_id=into_account_id,
            amount=amount,
            txn_date=txn_date,
            key=key,
            from_label=source_label,
            to_label=into_label,
        )

    @classmethod
    def transfer(
        cls,
        from_account_id: str,
        to_account_id: str,
        amount: Decimal,
        txn_date: date,
        key: str,
        from_label: str = "",
        to_label: str = "",
    ) -> "AccountingEffect":
        """이체 효과 생성"""
        return cls(
            kind=EffectKind.TRANSFER,
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            amount=amount,
            txn_date=txn_date,
            key=key,
            from_label=from_label,
            to_label=to_label,
        )

    @property
    def descriptor(self) -> "EffectDescriptor":
        """종류별 descriptor"""
        return DESCRIPTORS[self.kind]


def _amount_number(amount: Decimal) -> float:
    """JSON 숫자 (소수점 2자리)"""
    return float(amount.quantize(Decimal("0.01")))


def build_deposit_payload(effect: AccountingEffect) -> dict[str, Any]:
    """Deposit 요청 본문"""
    return {
        "TxnDate": format_txn_date(effect.txn_date),
        "DepositToAccountRef": {"value": effect.to_account_id},
        "PrivateNote": effect.key,
        "Line": [
            {
                "Amount": _amount_number(effect.amount),
                "DetailType": "DepositLineDetail",
                "DepositLineDetail": {
                    "AccountRef": {"value": effect.from_account_id},
                },
            }
        ],
    }


def build_transfer_payload(effect: AccountingEffect) -> dict[str, Any]:
    """Transfer 요청 본문"""
    return {
        "TxnDate": format_txn_date(effect.txn_date),
        "FromAccountRef": {"value": effect.from_account_id},
        "ToAccountRef": {"value": effect.to_account_id},
        "Amount": _amount_number(effect.amount),
        "PrivateNote": effect.key,
    }


@dataclass(frozen=True)
class EffectDescriptor:
    """종류별 QBO 엔티티 정보

    Attributes:
        entity: QBO 엔티티 이름
        date_field: 날짜 필터 필드
        note_field: idempotency key 저장 필드
        build_payload: 요청 본문 생성 함수
    """

    entity: str
    build_payload: Callable[[AccountingEffect], dict[str, Any]]
    date_field: str = "TxnDate"
    note_field: str = "PrivateNote"


DESCRIPTORS: dict[EffectKind, EffectDescriptor] = {
    EffectKind.DEPOSIT: EffectDescriptor(
        entity=EffectKind.DEPOSIT.value,
        build_payload=build_deposit_payload,
    ),
    EffectKind.TRANSFER: EffectDescriptor(
        entity=EffectKind.TRANSFER.value,
        build_payload=build_transfer_payload,
    ),
}
