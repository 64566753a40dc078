"""
Mirror Node 응답 파싱

원본 JSON → MirrorTransaction 변환.
잘못된 항목은 배치를 중단시키지 않도록 0 / 빈 값으로 취급.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from adapters.models import MirrorTransaction, MirrorTransfer


def parse_amount(value: Any) -> int:
    """금액 파싱 (tinybar 정수)

    None, 빈 문자열, 숫자가 아닌 값은 0으로 취급.

    Example:
        >>> parse_amount("500000000")
        500000000
        >>> parse_amount("abc")
        0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value

    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return 0

    if not number.is_finite():
        return 0

    return int(number)


def parse_transfer(data: dict[str, Any]) -> MirrorTransfer:
    """transfers[] 항목 파싱"""
    return MirrorTransfer(
        account=str(data.get("account") or ""),
        amount=parse_amount(data.get("amount")),
    )


def parse_transaction(data: dict[str, Any]) -> MirrorTransaction:
    """transactions[] 항목 파싱"""
    raw_transfers = data.get("transfers")
    if not isinstance(raw_transfers, (list, tuple)):
        raw_transfers = ()

    transfers = tuple(
        parse_transfer(item)
        for item in raw_transfers
        if isinstance(item, dict)
    )

    return MirrorTransaction(
        transaction_id=str(data.get("transaction_id") or ""),
        consensus_timestamp=str(data.get("consensus_timestamp") or ""),
        transfers=transfers,
        name=str(data.get("name") or ""),
        result=str(data.get("result") or ""),
    )


def parse_transactions_response(data: Any) -> list[MirrorTransaction]:
    """GET /transactions 응답 파싱 (원본 순서 유지: 최신순)"""
    if not isinstance(data, dict):
        return []

    return [
        parse_transaction(item)
        for item in (data.get("transactions") or [])
        if isinstance(item, dict)
    ]
