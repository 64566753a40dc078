"""
QuickBooks Online 어댑터

OAuth 세션, 쿼리, 엔티티 생성을 담당.
"""

from adapters.qbo.oauth import IntuitOAuthClient
from adapters.qbo.rest_client import QboRestClient
from adapters.qbo.session import QboSession, QboToken
from adapters.qbo.query import (
    escape_query_value,
    select_account_by_name,
    select_by_txn_date,
    select_recent,
)

__all__ = [
    "IntuitOAuthClient",
    "QboRestClient",
    "QboSession",
    "QboToken",
    "escape_query_value",
    "select_account_by_name",
    "select_by_txn_date",
    "select_recent",
]
