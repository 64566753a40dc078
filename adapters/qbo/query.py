"""
QBO 쿼리 언어 헬퍼

QBO는 제한된 SQL 유사 쿼리만 지원.
PrivateNote, 라인/참조 필드는 필터로 신뢰할 수 없으므로
동기화 중복 확인은 TxnDate만으로 후보를 조회한다.
"""

from datetime import date


def escape_query_value(value: object) -> str:
    """쿼리 문자열 리터럴 이스케이프 (역슬래시, 작은따옴표)

    Example:
        >>> escape_query_value("O'Brien")
        "O\\\\'Brien"
    """
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


def select_by_txn_date(
    entity: str,
    txn_date: date,
    max_results: int,
    fields: str = "Id, PrivateNote",
    date_field: str = "TxnDate",
) -> str:
    """같은 날짜 레코드 후보 조회 쿼리

    Example:
        >>> select_by_txn_date("Deposit", date(2023, 11, 14), 200)
        "select Id, PrivateNote from Deposit where TxnDate='2023-11-14' maxresults 200"
    """
    return (
        f"select {fields} from {entity} "
        f"where {date_field}='{txn_date.isoformat()}' "
        f"maxresults {max_results}"
    )


def select_account_by_name(name: str) -> str:
    """이름으로 계정 1건 조회 쿼리"""
    return f"select * from Account where Name='{escape_query_value(name)}' maxresults 1"


def select_recent(entity: str, max_results: int) -> str:
    """최근 생성순 목록 조회 쿼리"""
    return (
        f"select * from {entity} "
        f"order by MetaData.CreateTime desc "
        f"maxresults {max_results}"
    )
