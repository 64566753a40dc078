"""
Mock QBO 클라이언트

테스트 / dry-run용 메모리 내 QBO.
IQboClient Protocol 준수.

동기화가 사용하는 쿼리 형태만 지원:
- select <fields> from <Entity> where TxnDate='YYYY-MM-DD' maxresults N
- select * from Account where Name='...' maxresults 1
- select * from <Entity> order by MetaData.CreateTime desc maxresults N
"""

import copy
import re
from dataclasses import dataclass, field
from typing import Any

from core.domain.errors import BackendRejected
from core.utils.timezone import now_utc

_QUERY_RE = re.compile(
    r"^\s*select\s+(?P<fields>.+?)\s+from\s+(?P<entity>\w+)"
    r"(?:\s+where\s+(?P<field>\w+)\s*=\s*'(?P<value>(?:[^'\\]|\\.)*)')?"
    r"(?:\s+order\s+by\s+(?P<order>[\w.]+)(?:\s+(?P<direction>asc|desc))?)?"
    r"(?:\s+maxresults\s+(?P<max>\d+))?\s*$",
    re.IGNORECASE,
)


def _unescape(value: str) -> str:
    """쿼리 리터럴 이스케이프 해제"""
    return re.sub(r"\\(.)", r"\1", value)


def _ref_value(ref: Any) -> str | None:
    if isinstance(ref, dict):
        return ref.get("value")
    return None


@dataclass
class MockQboState:
    """Mock 상태 (메모리 내 저장)"""

    # 엔티티 이름 → 레코드 목록 (생성 순)
    records: dict[str, list[dict[str, Any]]] = field(default_factory=dict)

    # 호출 기록
    queries: list[str] = field(default_factory=list)
    creates: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    # 시뮬레이션 옵션
    fail_next_create: bool = False
    next_fault: dict[str, Any] | None = None

    id_counter: int = 0
    seq_counter: int = 0


class MockQboClient:
    """Mock QBO 클라이언트

    사용 예시:
    ```python
    client = MockQboClient()
    client.add_record("Deposit", {"TxnDate": "2023-11-14", "PrivateNote": "hedera:..."})
    rows = await client.query("select Id, PrivateNote from Deposit where TxnDate='2023-11-14' maxresults 200")
    ```
    """

    def __init__(self, state: MockQboState | None = None, company_name: str = "Sandbox Company"):
        self.state = state or MockQboState()
        self.company_name = company_name

    # -------------------------------------------------------------------------
    # 상태 조작 메서드 (테스트용)
    # -------------------------------------------------------------------------

    def _next_id(self) -> str:
        self.state.id_counter += 1
        return str(self.state.id_counter)

    def add_record(self, entity: str, record: dict[str, Any]) -> dict[str, Any]:
        """레코드 직접 추가 (Id, MetaData 자동 부여)"""
        stored = copy.deepcopy(record)
        stored.setdefault("Id", self._next_id())
        stored.setdefault("SyncToken", "0")
        stored.setdefault("MetaData", {"CreateTime": now_utc().isoformat()})
        self.state.seq_counter += 1
        stored["_seq"] = self.state.seq_counter
        self.state.records.setdefault(entity, []).append(stored)
        return stored

    def records(self, entity: str) -> list[dict[str, Any]]:
        """엔티티 레코드 목록 (사본)"""
        return [
            {k: v for k, v in record.items() if k != "_seq"}
            for record in self.state.records.get(entity, [])
        ]

    def fail_next_create(self, fault: dict[str, Any] | None = None) -> None:
        """다음 create 호출을 Fault로 실패시킴"""
        self.state.fail_next_create = True
        self.state.next_fault = fault or {
            "type": "ValidationFault",
            "Error": [{"Message": "Mock validation error", "Detail": "mock", "code": "2020"}],
        }

    # -------------------------------------------------------------------------
    # IQboClient 구현
    # -------------------------------------------------------------------------

    async def query(self, statement: str) -> dict[str, Any]:
        """쿼리 실행 (지원 형태만)"""
        self.state.queries.append(statement)

        match = _QUERY_RE.match(statement)
        if match is None:
            raise BackendRejected(
                f"Mock QBO cannot parse query: {statement}",
                payload={"type": "ValidationFault", "Error": [{"Message": "QueryParserError"}]},
            )

        entity = match.group("entity")
        rows = list(self.state.records.get(entity, []))

        where_field = match.group("field")
        if where_field:
            value = _unescape(match.group("value"))
            rows = [row for row in rows if str(row.get(where_field, "")) == value]

        if match.group("order"):
            descending = (match.group("direction") or "asc").lower() == "desc"
            rows.sort(key=lambda row: row.get("_seq", 0), reverse=descending)

        max_results = match.group("max")
        if max_results:
            rows = rows[: int(max_results)]

        fields = [f.strip() for f in match.group("fields").split(",")]
        if fields != ["*"]:
            rows = [{k: row[k] for k in fields if k in row} for row in rows]
        else:
            rows = [{k: v for k, v in row.items() if k != "_seq"} for row in rows]

        if not rows:
            return {}

        return {entity: copy.deepcopy(rows), "startPosition": 1, "maxResults": len(rows)}

    async def create(self, entity: str, payload: dict[str, Any]) -> dict[str, Any]:
        """엔티티 생성 (계정 참조 검증 포함)"""
        self.state.creates.append((entity, copy.deepcopy(payload)))

        if self.state.fail_next_create:
            fault = self.state.next_fault
            self.state.fail_next_create = False
            self.state.next_fault = None
            raise BackendRejected("Mock QBO fault", payload=fault)

        for ref in self._account_refs(entity, payload):
            if not any(a["Id"] == ref for a in self.state.records.get("Account", [])):
                raise BackendRejected(
                    f"Invalid Reference Id: {ref}",
                    payload={
                        "type": "ValidationFault",
                        "Error": [{"Message": "Invalid Reference Id", "Detail": ref, "code": "2500"}],
                    },
                )

        stored = self.add_record(entity, payload)
        return {k: v for k, v in stored.items() if k != "_seq"}

    async def get_company_info(self) -> dict[str, Any]:
        """회사 정보"""
        return {"CompanyInfo": {"CompanyName": self.company_name}}

    async def close(self) -> None:
        """리소스 정리 (없음)"""
        return None

    @staticmethod
    def _account_refs(entity: str, payload: dict[str, Any]) -> list[str]:
        """payload가 참조하는 계정 Id 목록"""
        refs: list[str | None] = []
        if entity == "Deposit":
            refs.append(_ref_value(payload.get("DepositToAccountRef")))
            for line in payload.get("Line", []):
                detail = line.get("DepositLineDetail") or {}
                refs.append(_ref_value(detail.get("AccountRef")))
        elif entity == "Transfer":
            refs.append(_ref_value(payload.get("FromAccountRef")))
            refs.append(_ref_value(payload.get("ToAccountRef")))
        return [ref for ref in refs if ref]
