"""
유틸리티 패키지

idempotency key 생성, 합의 타임스탬프 처리 등 공통 유틸리티
"""

from core.utils.idempotency import (
    KEY_NAMESPACE,
    make_idempotency_key,
    parse_idempotency_key,
    is_sync_key,
)
from core.utils.timezone import (
    now_utc,
    today_utc,
    parse_consensus_seconds,
    txn_date_from_consensus,
    format_txn_date,
)

__all__ = [
    "KEY_NAMESPACE",
    "make_idempotency_key",
    "parse_idempotency_key",
    "is_sync_key",
    "now_utc",
    "today_utc",
    "parse_consensus_seconds",
    "txn_date_from_consensus",
    "format_txn_date",
]
