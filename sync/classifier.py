"""
트랜잭션 분류기

추적 계정 기준으로 순이동량(tinybar), 방향, 상대 계정을 계산.
예외를 발생시키지 않음 (잘못된 금액은 파싱 단계에서 0으로 취급).
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from adapters.models import MirrorTransaction
from core.constants import Defaults
from core.types import Direction

# QBO 금액 정밀도
AMOUNT_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class Classification:
    """분류 결과

    Attributes:
        account: 기준 계정
        net_tinybar: 순이동량 (부호 있음)
        direction: INBOUND / OUTBOUND / NONE
        tracked_counterparty: 상대 계정 중 추적 계정 (없으면 None)
    """

    account: str
    net_tinybar: int
    direction: Direction
    tracked_counterparty: str | None = None

    @property
    def is_actionable(self) -> bool:
        """회계 처리 대상 여부 (순이동량 0은 제외)"""
        return self.net_tinybar != 0

    @property
    def amount(self) -> Decimal:
        """HBAR 금액 (절대값, 소수점 2자리)"""
        return tinybar_to_hbar(self.net_tinybar)


def tinybar_to_hbar(tinybar: int) -> Decimal:
    """tinybar → HBAR (절대값, ROUND_HALF_UP 2자리)

    Example:
        >>> tinybar_to_hbar(-300000000)
        Decimal('3.00')
        >>> tinybar_to_hbar(123456)
        Decimal('0.00')
    """
    hbar = Decimal(abs(tinybar)) / Decimal(Defaults.TINYBAR_PER_HBAR)
    return hbar.quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


def net_movement(tx: MirrorTransaction, account: str) -> int:
    """계정의 순이동량 (해당 계정 항목만 합산, 없으면 0)"""
    return sum(t.amount for t in tx.transfers if t.account == account)


def counterparties(tx: MirrorTransaction, account: str) -> list[tuple[str, int]]:
    """같은 트랜잭션의 다른 계정 항목 (원본 순서)"""
    return [
        (t.account, t.amount)
        for t in tx.transfers
        if t.account and t.account != account
    ]


def find_tracked_counterparty(
    tx: MirrorTransaction,
    account: str,
    tracked_accounts: Iterable[str],
) -> str | None:
    """출금 목적지로 사용할 추적 상대 계정

    입금받은(양수) 추적 계정을 우선하고, 없으면 부호와 무관하게
    처음 나타나는 추적 계정을 사용한다.
    """
    tracked = set(tracked_accounts)
    candidates = [
        (other, amount)
        for other, amount in counterparties(tx, account)
        if other in tracked
    ]

    for other, amount in candidates:
        if amount > 0:
            return other

    if candidates:
        return candidates[0][0]
    return None


def classify(
    tx: MirrorTransaction,
    account: str,
    tracked_accounts: Iterable[str] = (),
) -> Classification:
    """트랜잭션 분류

    Args:
        tx: Mirror Node 트랜잭션
        account: 기준(추적) 계정
        tracked_accounts: 추적 계정 집합 (상대 계정 분류용)

    Returns:
        Classification
    """
    net = net_movement(tx, account)

    if net > 0:
        direction = Direction.INBOUND
    elif net < 0:
        direction = Direction.OUTBOUND
    else:
        direction = Direction.NONE

    counterparty = None
    if direction == Direction.OUTBOUND:
        counterparty = find_tracked_counterparty(tx, account, tracked_accounts)

    return Classification(
        account=account,
        net_tinybar=net,
        direction=direction,
        tracked_counterparty=counterparty,
    )
