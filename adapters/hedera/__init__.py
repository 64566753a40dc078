"""
Hedera 어댑터

Mirror Node REST API 조회를 담당.
"""

from adapters.hedera.mirror_client import MirrorRestClient
from adapters.hedera.models import (
    parse_amount,
    parse_transaction,
    parse_transactions_response,
)

__all__ = [
    "MirrorRestClient",
    "parse_amount",
    "parse_transaction",
    "parse_transactions_response",
]
