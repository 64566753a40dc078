"""
State Machines

트랜잭션 동기화 처리의 상태 전이 관리.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class StateMachineError(Exception):
    """상태 전이 오류"""
    pass


class TransactionState(str, Enum):
    """트랜잭션 처리 상태

    전이 규칙:
    - PENDING → CLASSIFIED: 순이동량 계산
    - CLASSIFIED → KEYED: idempotency key / 날짜 계산
    - KEYED → DUPLICATE_LOCAL: 이번 실행에서 이미 본 key
    - KEYED → DUPLICATE_REMOTE: QBO에 동일 key 존재
    - KEYED → CREATED: QBO 레코드 생성 성공
    - (비종료 상태) → FAILED: 처리 중 예외
    """
    PENDING = "PENDING"
    CLASSIFIED = "CLASSIFIED"
    KEYED = "KEYED"
    DUPLICATE_LOCAL = "DUPLICATE_LOCAL"
    DUPLICATE_REMOTE = "DUPLICATE_REMOTE"
    CREATED = "CREATED"
    FAILED = "FAILED"


class StateMachine:
    """상태 머신 기본 클래스

    Args:
        initial_state: 초기 상태
        transitions: 허용된 전이 정의 {from_state: [to_states]}
        name: 머신 이름 (로깅용)
    """

    def __init__(
        self,
        initial_state: str | Enum,
        transitions: dict[str, list[str]],
        name: str = "StateMachine",
    ):
        self._state = initial_state.value if isinstance(initial_state, Enum) else initial_state
        self._transitions = transitions
        self._name = name
        self._history: list[tuple[str, str]] = []

    @property
    def state(self) -> str:
        """현재 상태"""
        return self._state

    def can_transition(self, to_state: str | Enum) -> bool:
        """전이 가능 여부 확인"""
        target = to_state.value if isinstance(to_state, Enum) else to_state
        allowed = self._transitions.get(self._state, [])
        return target in allowed

    def transition(self, to_state: str | Enum) -> str:
        """상태 전이

        Args:
            to_state: 목표 상태

        Returns:
            새 상태

        Raises:
            StateMachineError: 허용되지 않은 전이
        """
        target = to_state.value if isinstance(to_state, Enum) else to_state

        if not self.can_transition(target):
            allowed = self._transitions.get(self._state, [])
            raise StateMachineError(
                f"{self._name}: Cannot transition from {self._state} to {target}. "
                f"Allowed: {allowed}"
            )

        old_state = self._state
        self._state = target
        self._history.append((old_state, target))

        logger.debug(f"{self._name}: {old_state} → {target}")

        return target

    @property
    def history(self) -> list[tuple[str, str]]:
        """상태 전이 이력"""
        return self._history.copy()


class TransactionStateMachine(StateMachine):
    """트랜잭션 처리 상태 머신"""

    TRANSITIONS: dict[str, list[str]] = {
        "PENDING": ["CLASSIFIED", "FAILED"],
        "CLASSIFIED": ["KEYED", "FAILED"],
        "KEYED": ["DUPLICATE_LOCAL", "DUPLICATE_REMOTE", "CREATED", "FAILED"],
    }

    TERMINAL_STATES: frozenset[str] = frozenset(
        {"DUPLICATE_LOCAL", "DUPLICATE_REMOTE", "CREATED", "FAILED"}
    )

    def __init__(self, transaction_id: str = ""):
        super().__init__(
            initial_state=TransactionState.PENDING,
            transitions=self.TRANSITIONS,
            name=f"TransactionStateMachine[{transaction_id}]",
        )

    @property
    def is_terminal(self) -> bool:
        """종료 상태 여부"""
        return self._state in self.TERMINAL_STATES

    def fail(self) -> str:
        """FAILED로 전이 (이미 종료 상태면 현재 상태 유지)"""
        if self.is_terminal:
            return self._state
        return self.transition(TransactionState.FAILED)
