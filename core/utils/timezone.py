"""
타임존 유틸리티

Hedera 합의 타임스탬프("초.나노초")를 UTC 날짜로 변환하는 헬퍼
"""

import math
from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)"""
    return datetime.now(timezone.utc)


def today_utc() -> date:
    """오늘 UTC 날짜"""
    return now_utc().date()


def parse_consensus_seconds(consensus_timestamp: str | None) -> int | None:
    """합의 타임스탬프의 정수 초 부분 파싱

    Args:
        consensus_timestamp: "1737328182.123456789" 형식 문자열

    Returns:
        정수 초, 파싱 불가 시 None

    Example:
        >>> parse_consensus_seconds("1700000000.000000001")
        1700000000
        >>> parse_consensus_seconds("abc") is None
        True
    """
    if not consensus_timestamp:
        return None

    head = str(consensus_timestamp).split(".")[0].strip()
    try:
        seconds = float(head)
    except ValueError:
        return None

    if not math.isfinite(seconds):
        return None

    return int(seconds)


def txn_date_from_consensus(consensus_timestamp: str | None) -> date:
    """합의 타임스탬프 → 거래일 (UTC)

    파싱할 수 없으면 오늘 UTC 날짜로 대체한다.

    Example:
        >>> txn_date_from_consensus("1700000000.0")
        datetime.date(2023, 11, 14)
    """
    seconds = parse_consensus_seconds(consensus_timestamp)
    if seconds is None:
        return today_utc()

    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        return today_utc()


def format_txn_date(value: date) -> str:
    """QBO TxnDate 형식 (YYYY-MM-DD)"""
    return value.isoformat()
