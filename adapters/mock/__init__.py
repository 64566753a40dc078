"""
Mock 어댑터

테스트 및 dry-run용 메모리 내 구현.
"""

from adapters.mock.mirror_client import MockMirrorClient
from adapters.mock.qbo_client import MockQboClient, MockQboState

__all__ = [
    "MockMirrorClient",
    "MockQboClient",
    "MockQboState",
]
