"""
QBO 레코드 조회 (읽기 전용)

최근 생성순으로 Account / Deposit / Transfer 목록을 가져와
표시용 행으로 평탄화한다. 동기화가 만든 레코드는 is_sync_key로 표시.
"""

from typing import Any, Callable

from adapters.interfaces import IQboClient
from adapters.qbo.query import select_recent
from core.constants import Defaults
from core.types import RecordKind
from core.utils.idempotency import is_sync_key


def _ref_name(ref: Any) -> str | None:
    """참조 필드 표시 이름 (name 우선, 없으면 value)"""
    if not isinstance(ref, dict):
        return None
    return ref.get("name") or ref.get("value")


def account_row(record: dict[str, Any]) -> dict[str, Any]:
    """Account → 표시 행"""
    return {
        "id": record.get("Id"),
        "name": record.get("Name"),
        "account_type": record.get("AccountType"),
        "account_sub_type": record.get("AccountSubType"),
        "created_at": (record.get("MetaData") or {}).get("CreateTime"),
    }


def deposit_row(record: dict[str, Any]) -> dict[str, Any]:
    """Deposit → 표시 행 (첫 번째 라인 기준)"""
    lines = record.get("Line") or [{}]
    first = lines[0] if isinstance(lines[0], dict) else {}
    detail = first.get("DepositLineDetail") or {}
    note = record.get("PrivateNote")
    return {
        "id": record.get("Id"),
        "txn_date": record.get("TxnDate"),
        "amount": first.get("Amount", record.get("TotalAmt")),
        "from": _ref_name(detail.get("AccountRef")),
        "to": _ref_name(record.get("DepositToAccountRef")),
        "private_note": note,
        "is_sync_key": is_sync_key(note),
    }


def transfer_row(record: dict[str, Any]) -> dict[str, Any]:
    """Transfer → 표시 행"""
    note = record.get("PrivateNote")
    return {
        "id": record.get("Id"),
        "txn_date": record.get("TxnDate"),
        "amount": record.get("Amount"),
        "from": _ref_name(record.get("FromAccountRef")),
        "to": _ref_name(record.get("ToAccountRef")),
        "private_note": note,
        "is_sync_key": is_sync_key(note),
    }


_ROW_BUILDERS: dict[RecordKind, Callable[[dict[str, Any]], dict[str, Any]]] = {
    RecordKind.ACCOUNT: account_row,
    RecordKind.DEPOSIT: deposit_row,
    RecordKind.TRANSFER: transfer_row,
}


def default_limit(kind: RecordKind) -> int:
    """종류별 기본 조회 개수"""
    if kind == RecordKind.ACCOUNT:
        return Defaults.LIST_ACCOUNTS_LIMIT
    return Defaults.LIST_RECORDS_LIMIT


async def list_records(
    client: IQboClient,
    kind: RecordKind,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """최근 생성순 레코드 목록

    Args:
        client: QBO 클라이언트
        kind: 조회 종류
        limit: 최대 개수 (None이면 종류별 기본값)

    Returns:
        표시용 행 목록
    """
    entity = kind.value
    response = await client.query(select_recent(entity, limit or default_limit(kind)))
    builder = _ROW_BUILDERS[kind]
    return [builder(record) for record in response.get(entity) or []]
