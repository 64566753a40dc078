"""
타입 정의 모듈

Enum 등 핵심 타입 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class QboEnvironment(str, Enum):
    """QBO 환경 (실운영 / 샌드박스)"""

    PRODUCTION = "production"
    SANDBOX = "sandbox"


class MirrorNetwork(str, Enum):
    """Hedera 네트워크"""

    MAINNET = "mainnet"
    TESTNET = "testnet"


class Direction(str, Enum):
    """추적 계정 기준 자금 이동 방향"""

    INBOUND = "INBOUND"  # net > 0
    OUTBOUND = "OUTBOUND"  # net < 0
    NONE = "NONE"  # net == 0 (처리 대상 아님)


class EffectKind(str, Enum):
    """회계 효과 종류 (QBO 엔티티 이름과 동일)"""

    DEPOSIT = "Deposit"
    TRANSFER = "Transfer"


class RecordKind(str, Enum):
    """읽기 전용 목록 조회 대상"""

    ACCOUNT = "Account"
    DEPOSIT = "Deposit"
    TRANSFER = "Transfer"


class OutcomeStatus(str, Enum):
    """트랜잭션별 처리 결과"""

    CREATED = "CREATED"
    SKIPPED_DUPLICATE_LOCAL = "SKIPPED_DUPLICATE_LOCAL"
    SKIPPED_DUPLICATE_REMOTE = "SKIPPED_DUPLICATE_REMOTE"
    FAILED = "FAILED"

    @property
    def is_skipped(self) -> bool:
        """중복으로 건너뛴 결과인지"""
        return self in (
            OutcomeStatus.SKIPPED_DUPLICATE_LOCAL,
            OutcomeStatus.SKIPPED_DUPLICATE_REMOTE,
        )
