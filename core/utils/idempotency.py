"""
Idempotency 유틸리티

QBO PrivateNote에 기록하는 idempotency key 생성 및 파싱
규칙: {namespace}:{transaction_id}:{consensus_timestamp}
"""

from core.constants import Defaults

# 기본 네임스페이스
KEY_NAMESPACE: str = Defaults.KEY_NAMESPACE


def make_idempotency_key(
    transaction_id: str | None,
    consensus_timestamp: str | None,
    namespace: str = KEY_NAMESPACE,
) -> str:
    """결정적 idempotency key 생성

    빈 값도 예외 없이 (퇴화된) key를 만든다.

    Args:
        transaction_id: Mirror Node 트랜잭션 ID
        consensus_timestamp: 합의 타임스탬프 ("초.나노초")
        namespace: key 접두사

    Returns:
        {namespace}:{transaction_id}:{consensus_timestamp}

    Example:
        >>> make_idempotency_key("0.0.1-1-1", "1700000000.0")
        'hedera:0.0.1-1-1:1700000000.0'
    """
    return f"{namespace}:{transaction_id or ''}:{consensus_timestamp or ''}"


def parse_idempotency_key(
    key: str,
    namespace: str = KEY_NAMESPACE,
) -> tuple[str, str] | None:
    """key에서 (transaction_id, consensus_timestamp) 추출

    트랜잭션 ID 자체에는 ':'가 없으므로 마지막 ':' 기준으로 분리.

    Example:
        >>> parse_idempotency_key("hedera:0.0.1-1-1:1700000000.0")
        ('0.0.1-1-1', '1700000000.0')
        >>> parse_idempotency_key("manual note") is None
        True
    """
    if not key:
        return None

    prefix = f"{namespace}:"
    if not key.startswith(prefix):
        return None

    body = key[len(prefix):]
    if ":" not in body:
        return None

    transaction_id, consensus_timestamp = body.rsplit(":", 1)
    return transaction_id, consensus_timestamp


def is_sync_key(note: str | None, namespace: str = KEY_NAMESPACE) -> bool:
    """이 시스템이 기록한 PrivateNote인지 확인"""
    if not note:
        return False
    return parse_idempotency_key(note, namespace) is not None
