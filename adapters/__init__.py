"""
어댑터 레이어

외부 서비스(Hedera Mirror Node, QuickBooks Online)와의 연동을 담당.
Protocol 기반 인터페이스로 Mock 교체 가능.
"""

from adapters.interfaces import (
    IMirrorClient,
    IQboClient,
)
from adapters.models import (
    MirrorTransaction,
    MirrorTransfer,
    AccountingRecordRef,
)

__all__ = [
    # Interfaces
    "IMirrorClient",
    "IQboClient",
    # Models
    "MirrorTransaction",
    "MirrorTransfer",
    "AccountingRecordRef",
]
