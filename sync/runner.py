"""
동기화 배치 실행기 (Batch Orchestrator)

Mirror Node 최근 1페이지를 가져와 트랜잭션마다
분류 → key 계산 → 실행 내 중복 확인 → QBO 중복 확인 → 생성 순으로 처리.

실패 정책:
- 준비 단계(세션 검증, 계정 bootstrap, Mirror 조회) 실패: 배치 전체 중단
- 트랜잭션 단위 실패: FAILED 결과로 기록하고 다음 트랜잭션 계속
- SessionInvalid: 어느 단계든 즉시 중단

주의: "확인 후 생성"은 원자적이지 않다. 같은 계정에 대해 두 실행이
동시에 돌면 둘 다 확인을 통과해 중복 레코드가 생길 수 있다.
DuplicateGuard는 한 번의 실행 안에서만 유효하다.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable

from adapters.interfaces import IMirrorClient, IQboClient
from adapters.models import MirrorTransaction
from adapters.qbo.session import QboSession
from core.constants import Defaults, LedgerAccountNames
from core.domain.errors import SessionInvalid, SyncError
from core.domain.state_machines import TransactionState, TransactionStateMachine
from core.types import Direction, EffectKind, OutcomeStatus
from core.utils.idempotency import make_idempotency_key
from core.utils.timezone import now_utc, txn_date_from_consensus
from sync.accounts import LedgerAccountDirectory
from sync.classifier import Classification, classify
from sync.effects import AccountingEffect
from sync.resolver import DuplicateResolver
from sync.writer import EffectWriter

logger = logging.getLogger(__name__)

EXTERNAL_WALLET_LABEL = "External Wallet"


class DuplicateGuard:
    """실행 내 중복 key 가드

    한 번의 실행에서 이미 본 key의 QBO 조회를 생략한다.
    실행 간에는 공유하지 않는다 (실행마다 새로 만들거나 호출자가 전달).
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def check_and_add(self, key: str) -> bool:
        """이미 본 key인지 확인하고 기록

        Returns:
            True if 이번 실행에서 이미 본 key
        """
        if key in self._seen:
            return True
        self._seen.add(key)
        return False

    def reset(self) -> None:
        """기록 초기화 (세션/회사 변경 시)"""
        self._seen.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._seen

    def __len__(self) -> int:
        return len(self._seen)


@dataclass(frozen=True)
class RunOutcome:
    """트랜잭션별 처리 결과

    Attributes:
        status: 처리 결과
        key: idempotency key
        transaction_id: Mirror Node 트랜잭션 ID
        consensus_timestamp: 합의 타임스탬프
        kind: 효과 종류 (실행 내 중복이면 None)
        from_label: 표시용 출발
        to_label: 표시용 도착
        amount: HBAR 금액
        txn_date: 거래일
        record_id: 생성된 QBO Id (CREATED일 때)
        error: 구조화된 에러 (FAILED일 때)
    """

    status: OutcomeStatus
    key: str
    transaction_id: str
    consensus_timestamp: str
    kind: EffectKind | None = None
    from_label: str = ""
    to_label: str = ""
    amount: Decimal | None = None
    txn_date: date | None = None
    record_id: str | None = None
    error: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """직렬화용 dict"""
        return {
            "status": self.status.value,
            "key": self.key,
            "transaction_id": self.transaction_id,
            "consensus_timestamp": self.consensus_timestamp,
            "type": self.kind.value if self.kind else None,
            "from": self.from_label or None,
            "to": self.to_label or None,
            "hbar": str(self.amount) if self.amount is not None else None,
            "txn_date": self.txn_date.isoformat() if self.txn_date else None,
            "record_id": self.record_id,
            "error": self.error,
        }


@dataclass
class SyncReport:
    """배치 실행 결과"""

    target_account: str
    mirror_base_url: str = ""
    outcomes: list[RunOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=now_utc)
    finished_at: datetime | None = None

    def _count(self, *statuses: OutcomeStatus) -> int:
        return sum(1 for o in self.outcomes if o.status in statuses)

    @property
    def created_count(self) -> int:
        """생성 건수"""
        return self._count(OutcomeStatus.CREATED)

    @property
    def skipped_count(self) -> int:
        """중복으로 건너뛴 건수 (실행 내 + QBO)"""
        return self._count(
            OutcomeStatus.SKIPPED_DUPLICATE_LOCAL,
            OutcomeStatus.SKIPPED_DUPLICATE_REMOTE,
        )

    @property
    def failed_count(self) -> int:
        """실패 건수"""
        return self._count(OutcomeStatus.FAILED)

    def to_dict(self) -> dict[str, Any]:
        """직렬화용 dict"""
        return {
            "target_account": self.target_account,
            "mirror": self.mirror_base_url,
            "created": self.created_count,
            "skipped": self.skipped_count,
            "failed": self.failed_count,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "results": [o.to_dict() for o in self.outcomes],
        }


@dataclass(frozen=True)
class _RunAccounts:
    """실행 시작 시 확보한 QBO 계정 Id"""

    target: str
    wallet_id: str
    clearing_id: str
    outflow_id: str


def error_to_dict(error: Exception) -> dict[str, Any]:
    """예외 → 구조화된 에러 정보"""
    if isinstance(error, SyncError):
        return error.to_dict()
    return {"kind": type(error).__name__, "message": str(error), "payload": None}


class SyncRunner:
    """Hedera → QBO 동기화 실행기

    트랜잭션은 Mirror Node가 반환한 순서대로 하나씩 처리하며
    QBO에 동시 요청을 보내지 않는다.

    Args:
        mirror: Mirror Node 클라이언트
        qbo: QBO 클라이언트
        tracked_accounts: 추적 계정 집합
        session: QBO 세션 (있으면 시작 전에 검증)
        page_size: Mirror Node 조회 개수
        candidate_cap: 같은 날짜 중복 후보 조회 상한
        mirror_base_url: 보고서 표시용 Mirror Node URL
    """

    def __init__(
        self,
        mirror: IMirrorClient,
        qbo: IQboClient,
        tracked_accounts: Iterable[str] = (),
        session: QboSession | None = None,
        page_size: int = Defaults.PAGE_SIZE,
        candidate_cap: int = Defaults.CANDIDATE_QUERY_CAP,
        mirror_base_url: str = "",
    ):
        self.mirror = mirror
        self.qbo = qbo
        self.tracked_accounts = frozenset(tracked_accounts)
        self.session = session
        self.page_size = page_size
        self.mirror_base_url = mirror_base_url

        self.resolver = DuplicateResolver(qbo, candidate_cap=candidate_cap)
        self.writer = EffectWriter(qbo)

    async def run(
        self,
        target_account: str,
        guard: DuplicateGuard | None = None,
        limit: int | None = None,
    ) -> SyncReport:
        """동기화 배치 1회 실행

        Args:
            target_account: 대상 Hedera 계정
            guard: 실행 내 중복 가드 (None이면 새로 생성)
            limit: Mirror Node 조회 개수 (None이면 page_size)

        Returns:
            SyncReport (트랜잭션 순서대로 결과)

        Raises:
            SessionInvalid: 세션 없음 / 회사 불일치
            UpstreamUnavailable: 준비 단계 조회 실패
            BackendRejected: 계정 bootstrap 실패
        """
        target = target_account.strip()
        if self.session is not None:
            self.session.require_realm()

        guard = guard if guard is not None else DuplicateGuard()
        report = SyncReport(target_account=target, mirror_base_url=self.mirror_base_url)

        logger.info(f"동기화 시작: {target}")

        directory = LedgerAccountDirectory(self.qbo)
        accounts = _RunAccounts(
            target=target,
            wallet_id=await directory.wallet(target),
            clearing_id=await directory.clearing(),
            outflow_id=await directory.external_outflow(),
        )

        transactions = await self.mirror.get_transactions(
            target,
            limit=limit or self.page_size,
        )

        for tx in transactions:
            outcome = await self._process(tx, accounts, directory, guard)
            if outcome is not None:
                report.outcomes.append(outcome)

        report.finished_at = now_utc()

        logger.info(
            f"동기화 완료: {target} "
            f"(created={report.created_count}, skipped={report.skipped_count}, "
            f"failed={report.failed_count})",
        )
        return report

    async def _process(
        self,
        tx: MirrorTransaction,
        accounts: _RunAccounts,
        directory: LedgerAccountDirectory,
        guard: DuplicateGuard,
    ) -> RunOutcome | None:
        """트랜잭션 1건 처리

        Returns:
            RunOutcome, 순이동량 0이면 None
        """
        machine = TransactionStateMachine(tx.transaction_id)

        classification = classify(tx, accounts.target, self.tracked_accounts)
        machine.transition(TransactionState.CLASSIFIED)

        if not classification.is_actionable:
            logger.debug(f"순이동량 0, 건너뜀: {tx.transaction_id}")
            return None

        key = make_idempotency_key(tx.transaction_id, tx.consensus_timestamp)
        txn_date = txn_date_from_consensus(tx.consensus_timestamp)
        machine.transition(TransactionState.KEYED)

        base = RunOutcome(
            status=OutcomeStatus.FAILED,
            key=key,
            transaction_id=tx.transaction_id,
            consensus_timestamp=tx.consensus_timestamp,
            amount=classification.amount,
            txn_date=txn_date,
        )

        if guard.check_and_add(key):
            machine.transition(TransactionState.DUPLICATE_LOCAL)
            logger.info(f"실행 내 중복, 건너뜀: {key}")
            return _replace(base, status=OutcomeStatus.SKIPPED_DUPLICATE_LOCAL)

        effect: AccountingEffect | None = None
        try:
            effect = await self._build_effect(
                classification, accounts, directory, key, txn_date
            )

            if await self.resolver.exists(effect):
                machine.transition(TransactionState.DUPLICATE_REMOTE)
                return _with_effect(base, effect, OutcomeStatus.SKIPPED_DUPLICATE_REMOTE)

            record = await self.writer.create(effect)
            machine.transition(TransactionState.CREATED)
            outcome = _with_effect(base, effect, OutcomeStatus.CREATED)
            return _replace(outcome, record_id=record.record_id)

        except SessionInvalid:
            raise

        except Exception as e:
            machine.fail()
            logger.error(
                f"트랜잭션 처리 실패: {tx.transaction_id}",
                extra={"key": key, "error": str(e)},
                exc_info=True,
            )
            outcome = base if effect is None else _with_effect(base, effect, OutcomeStatus.FAILED)
            return _replace(outcome, error=error_to_dict(e))

    async def _build_effect(
        self,
        classification: Classification,
        accounts: _RunAccounts,
        directory: LedgerAccountDirectory,
        key: str,
        txn_date: date,
    ) -> AccountingEffect:
        """분류 결과 → 회계 효과

        입금: Clearing → 대상 지갑
        출금: 대상 지갑 → 추적 상대 지갑 (없으면 외부 유출 계정)
        """
        if classification.direction == Direction.INBOUND:
            return AccountingEffect.deposit(
                into_account_id=accounts.wallet_id,
                source_account_id=accounts.clearing_id,
                amount=classification.amount,
                txn_date=txn_date,
                key=key,
                into_label=accounts.target,
                source_label=LedgerAccountNames.CLEARING_NAME,
            )

        counterparty = classification.tracked_counterparty
        if counterparty:
            to_account_id = await directory.wallet(counterparty)
            to_label = counterparty
        else:
            to_account_id = accounts.outflow_id
            to_label = EXTERNAL_WALLET_LABEL

        return AccountingEffect.transfer(
            from_account_id=accounts.wallet_id,
            to_account_id=to_account_id,
            amount=classification.amount,
            txn_date=txn_date,
            key=key,
            from_label=accounts.target,
            to_label=to_label,
        )


def _replace(outcome: RunOutcome, **changes: Any) -> RunOutcome:
    return replace(outcome, **changes)


def _with_effect(
    outcome: RunOutcome,
    effect: AccountingEffect,
    status: OutcomeStatus,
) -> RunOutcome:
    """효과 정보를 채운 결과"""
    return _replace(
        outcome,
        status=status,
        kind=effect.kind,
        from_label=effect.from_label,
        to_label=effect.to_label,
    )
