"""
동기화 배치 실행기 (SyncRunner) 테스트

입금 / 출금 / 중복 / 실패 격리 / 세션 검증 시나리오
"""

from datetime import date
from decimal import Decimal

import pytest

from adapters.mock.mirror_client import MockMirrorClient
from adapters.mock.qbo_client import MockQboClient
from adapters.qbo.session import QboSession, QboToken
from core.domain.errors import BackendRejected, SessionInvalid, UpstreamUnavailable
from core.types import EffectKind, OutcomeStatus
from core.utils.timezone import today_utc
from sync.runner import DuplicateGuard, SyncRunner, error_to_dict

TARGET = "0.0.100"
TRACKED = "0.0.200"
EXTERNAL = "0.0.999"
TS = "1700000000.0"
KEY = f"hedera:0.0.1-1-1:{TS}"


def _runner(
    mirror: MockMirrorClient,
    qbo: MockQboClient,
    session: QboSession | None = None,
) -> SyncRunner:
    return SyncRunner(
        mirror=mirror,
        qbo=qbo,
        tracked_accounts={TARGET, TRACKED},
        session=session,
        page_size=25,
        mirror_base_url="https://testnet.mirrornode.hedera.com/api/v1",
    )


class TestDuplicateGuard:
    """DuplicateGuard 테스트"""

    def test_first_sight_records(self) -> None:
        guard = DuplicateGuard()
        assert guard.check_and_add("k") is False
        assert guard.check_and_add("k") is True
        assert "k" in guard
        assert len(guard) == 1

    def test_reset(self) -> None:
        guard = DuplicateGuard()
        guard.check_and_add("k")
        guard.reset()
        assert guard.check_and_add("k") is False


class TestFreshDeposit:
    """입금 시나리오"""

    @pytest.mark.asyncio
    async def test_creates_deposit(
        self, make_tx, mock_mirror, mock_qbo, qbo_session, account_id_of
    ) -> None:
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert report.created_count == 1
        assert report.skipped_count == 0
        assert report.failed_count == 0

        outcome = report.outcomes[0]
        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.kind == EffectKind.DEPOSIT
        assert outcome.key == KEY
        assert outcome.amount == Decimal("5.00")
        assert outcome.txn_date == date(2023, 11, 14)
        assert outcome.from_label == "Hedera Clearing"
        assert outcome.to_label == TARGET

        deposit = mock_qbo.records("Deposit")[0]
        assert deposit["PrivateNote"] == KEY
        assert deposit["TxnDate"] == "2023-11-14"
        assert deposit["DepositToAccountRef"]["value"] == account_id_of("Hedera 0.0.100")
        assert (
            deposit["Line"][0]["DepositLineDetail"]["AccountRef"]["value"]
            == account_id_of("Hedera Clearing")
        )
        assert deposit["Line"][0]["Amount"] == 5.0
        assert outcome.record_id == deposit["Id"]

    @pytest.mark.asyncio
    async def test_bootstraps_accounts(self, mock_mirror, mock_qbo, qbo_session) -> None:
        """트랜잭션이 없어도 계정은 준비"""
        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert report.outcomes == []
        names = sorted(a["Name"] for a in mock_qbo.records("Account"))
        assert names == ["External Hedera Outflow", "Hedera 0.0.100", "Hedera Clearing"]


class TestDuplicates:
    """중복 시나리오"""

    @pytest.mark.asyncio
    async def test_remote_duplicate_skip(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """이미 생성된 Deposit → DUPLICATE_REMOTE"""
        mock_qbo.add_record("Deposit", {"TxnDate": "2023-11-14", "PrivateNote": KEY})
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert report.outcomes[0].status == OutcomeStatus.SKIPPED_DUPLICATE_REMOTE
        assert report.skipped_count == 1
        assert len(mock_qbo.records("Deposit")) == 1

    @pytest.mark.asyncio
    async def test_second_run_is_idempotent(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """연속 2회 실행 → 두 번째는 전부 DUPLICATE_REMOTE"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))
        mock_mirror.add(TARGET, make_tx("0.0.1-1-2", "1700000100.0", [(TARGET, -300000000), (TRACKED, 300000000)]))
        mock_mirror.add(TARGET, make_tx("0.0.1-1-3", "1700000200.0", [(TARGET, -100000000), (EXTERNAL, 100000000)]))

        first = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)
        records_after_first = len(mock_qbo.records("Deposit")) + len(mock_qbo.records("Transfer"))

        second = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)
        records_after_second = len(mock_qbo.records("Deposit")) + len(mock_qbo.records("Transfer"))

        assert first.created_count == 3
        assert second.created_count == 0
        assert all(o.status == OutcomeStatus.SKIPPED_DUPLICATE_REMOTE for o in second.outcomes)
        assert records_after_first == records_after_second == 3

    @pytest.mark.asyncio
    async def test_local_duplicate_skips_backend(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """같은 실행에서 반복된 key → QBO 조회 없이 DUPLICATE_LOCAL"""
        tx = make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)])
        mock_mirror.add(TARGET, tx)
        mock_mirror.add(TARGET, tx)

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert [o.status for o in report.outcomes] == [
            OutcomeStatus.CREATED,
            OutcomeStatus.SKIPPED_DUPLICATE_LOCAL,
        ]
        deposit_queries = [q for q in mock_qbo.state.queries if "from Deposit" in q]
        assert len(deposit_queries) == 1

    @pytest.mark.asyncio
    async def test_caller_guard(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """호출자가 전달한 가드 사용"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))
        guard = DuplicateGuard()
        guard.check_and_add(KEY)

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET, guard=guard)

        assert report.outcomes[0].status == OutcomeStatus.SKIPPED_DUPLICATE_LOCAL
        assert mock_qbo.records("Deposit") == []


class TestOutbound:
    """출금 시나리오"""

    @pytest.mark.asyncio
    async def test_internal_transfer(
        self, make_tx, mock_mirror, mock_qbo, qbo_session, account_id_of
    ) -> None:
        """추적 계정 간 이체 → 상대 지갑 계정으로 Transfer"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-2", TS, [(TARGET, -300000000), (TRACKED, 300000000)]))

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        outcome = report.outcomes[0]
        assert outcome.status == OutcomeStatus.CREATED
        assert outcome.kind == EffectKind.TRANSFER
        assert outcome.amount == Decimal("3.00")
        assert outcome.to_label == TRACKED

        transfer = mock_qbo.records("Transfer")[0]
        assert transfer["FromAccountRef"]["value"] == account_id_of("Hedera 0.0.100")
        assert transfer["ToAccountRef"]["value"] == account_id_of("Hedera 0.0.200")
        assert transfer["Amount"] == 3.0

    @pytest.mark.asyncio
    async def test_outflow_to_untracked(
        self, make_tx, mock_mirror, mock_qbo, qbo_session, account_id_of
    ) -> None:
        """추적하지 않는 상대 → 외부 유출 계정"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-3", TS, [(TARGET, -300000000), (EXTERNAL, 300000000)]))

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert report.outcomes[0].to_label == "External Wallet"
        transfer = mock_qbo.records("Transfer")[0]
        assert transfer["ToAccountRef"]["value"] == account_id_of("External Hedera Outflow")
        assert all(a["Name"] != "Hedera 0.0.999" for a in mock_qbo.records("Account"))


class TestFiltering:
    """처리 대상 필터 테스트"""

    @pytest.mark.asyncio
    async def test_zero_movement_produces_nothing(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """순이동량 0 → 결과 없음, 쓰기 없음"""
        mock_mirror.add(TARGET, make_tx("fee-only", TS, [(TARGET, 100), (TARGET, -100), (EXTERNAL, 5)]))
        mock_mirror.add(TARGET, make_tx("other", TS, [(EXTERNAL, -5), ("0.0.3", 5)]))

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert report.outcomes == []
        assert mock_qbo.records("Deposit") == []
        assert mock_qbo.records("Transfer") == []

    @pytest.mark.asyncio
    async def test_order_preserved(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """Mirror Node 반환 순서대로 처리"""
        for i in (3, 1, 2):
            mock_mirror.add(TARGET, make_tx(f"0.0.1-1-{i}", f"170000000{i}.0", [(TARGET, 100000000)]))

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert [o.transaction_id for o in report.outcomes] == ["0.0.1-1-3", "0.0.1-1-1", "0.0.1-1-2"]

    @pytest.mark.asyncio
    async def test_malformed_timestamp_uses_today(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """타임스탬프 파싱 불가 → 오늘 UTC 날짜"""
        mock_mirror.add(TARGET, make_tx("bad-ts", "garbage", [(TARGET, 100000000)]))

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert report.outcomes[0].txn_date == today_utc()
        assert report.outcomes[0].key == "hedera:bad-ts:garbage"

    @pytest.mark.asyncio
    async def test_limit_and_target_strip(self, mock_mirror, mock_qbo, qbo_session) -> None:
        """조회 개수 전달, 계정 앞뒤 공백 제거"""
        await _runner(mock_mirror, mock_qbo, qbo_session).run(f"  {TARGET} ", limit=5)
        assert mock_mirror.calls == [(TARGET, 5)]

        await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)
        assert mock_mirror.calls[-1] == (TARGET, 25)


class TestFailureIsolation:
    """실패 격리 테스트"""

    @pytest.mark.asyncio
    async def test_backend_rejected_continues(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """한 건 실패해도 다음 트랜잭션 계속"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))
        mock_mirror.add(TARGET, make_tx("0.0.1-1-2", "1700000100.0", [(TARGET, 200000000)]))

        # 계정은 미리 존재, 첫 Deposit 생성만 실패
        mock_qbo.add_record("Account", {"Name": "Hedera 0.0.100", "AccountType": "Bank"})
        mock_qbo.add_record("Account", {"Name": "Hedera Clearing", "AccountType": "Income"})
        mock_qbo.add_record("Account", {"Name": "External Hedera Outflow", "AccountType": "Bank"})
        mock_qbo.fail_next_create()

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert [o.status for o in report.outcomes] == [OutcomeStatus.FAILED, OutcomeStatus.CREATED]
        failed = report.outcomes[0]
        assert failed.error is not None
        assert failed.error["kind"] == "BackendRejected"
        assert failed.error["payload"]["type"] == "ValidationFault"
        assert failed.kind == EffectKind.DEPOSIT
        assert report.failed_count == 1
        assert report.created_count == 1

    @pytest.mark.asyncio
    async def test_per_transaction_upstream_failure(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """트랜잭션 처리 중 전송 오류도 FAILED로 기록"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))

        runner = _runner(mock_mirror, mock_qbo, qbo_session)
        original_query = mock_qbo.query

        async def flaky_query(statement):
            if "from Deposit" in statement:
                raise UpstreamUnavailable("QBO HTTP 503", status_code=503)
            return await original_query(statement)

        mock_qbo.query = flaky_query  # type: ignore[method-assign]

        report = await runner.run(TARGET)

        assert report.outcomes[0].status == OutcomeStatus.FAILED
        assert report.outcomes[0].error["status_code"] == 503

    @pytest.mark.asyncio
    async def test_session_invalid_mid_run_propagates(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """처리 중 SessionInvalid는 배치 중단"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))

        runner = _runner(mock_mirror, mock_qbo, qbo_session)
        original_query = mock_qbo.query

        async def expired(statement):
            if "from Deposit" in statement:
                raise SessionInvalid("QBO rejected the access token (401). Re-authorize.")
            return await original_query(statement)

        mock_qbo.query = expired  # type: ignore[method-assign]

        with pytest.raises(SessionInvalid):
            await runner.run(TARGET)


class TestSetupFailures:
    """준비 단계 실패 테스트"""

    @pytest.mark.asyncio
    async def test_no_session_makes_no_calls(self, make_tx, mock_mirror, mock_qbo) -> None:
        """세션 없음 → 어떤 호출도 하지 않음"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))

        with pytest.raises(SessionInvalid):
            await _runner(mock_mirror, mock_qbo, QboSession()).run(TARGET)

        assert mock_qbo.state.queries == []
        assert mock_mirror.calls == []

    @pytest.mark.asyncio
    async def test_realm_mismatch_aborts(self, mock_mirror, mock_qbo) -> None:
        session = QboSession(token=QboToken(access_token="a", realm_id="111"), bound_realm_id="222")

        with pytest.raises(SessionInvalid, match="Realm mismatch"):
            await _runner(mock_mirror, mock_qbo, session).run(TARGET)

        assert mock_qbo.state.queries == []

    @pytest.mark.asyncio
    async def test_mirror_failure_aborts(self, mock_mirror, mock_qbo, qbo_session) -> None:
        """Mirror Node 조회 실패 → 배치 중단"""
        mock_mirror.fail_with = UpstreamUnavailable("Mirror node HTTP 500", status_code=500)

        with pytest.raises(UpstreamUnavailable):
            await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

    @pytest.mark.asyncio
    async def test_account_bootstrap_failure_aborts(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        """계정 생성 실패 → 트랜잭션 처리 전에 중단"""
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))
        mock_qbo.fail_next_create()

        with pytest.raises(BackendRejected):
            await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)

        assert mock_mirror.calls == []
        assert mock_qbo.records("Deposit") == []


class TestReport:
    """SyncReport 직렬화 테스트"""

    @pytest.mark.asyncio
    async def test_to_dict(self, make_tx, mock_mirror, mock_qbo, qbo_session) -> None:
        mock_mirror.add(TARGET, make_tx("0.0.1-1-1", TS, [(TARGET, 500000000)]))

        report = await _runner(mock_mirror, mock_qbo, qbo_session).run(TARGET)
        data = report.to_dict()

        assert data["target_account"] == TARGET
        assert data["mirror"] == "https://testnet.mirrornode.hedera.com/api/v1"
        assert data["created"] == 1
        assert data["skipped"] == 0
        assert data["failed"] == 0
        assert data["finished_at"] is not None
        assert data["results"][0] == {
            "status": "CREATED",
            "key": KEY,
            "transaction_id": "0.0.1-1-1",
            "consensus_timestamp": TS,
            "type": "Deposit",
            "from": "Hedera Clearing",
            "to": TARGET,
            "hbar": "5.00",
            "txn_date": "2023-11-14",
            "record_id": report.outcomes[0].record_id,
            "error": None,
        }

    def test_error_to_dict_for_plain_exception(self) -> None:
        assert error_to_dict(RuntimeError("boom")) == {
            "kind": "RuntimeError",
            "message": "boom",
            "payload": None,
        }
