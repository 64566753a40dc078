"""
Mirror Node 응답 파싱 테스트
"""

import pytest

from adapters.hedera.models import (
    parse_amount,
    parse_transaction,
    parse_transactions_response,
)
from adapters.models import MirrorTransfer


class TestParseAmount:
    """parse_amount 함수 테스트"""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (500000000, 500000000),
            (-300000000, -300000000),
            ("500000000", 500000000),
            ("-42", -42),
            (None, 0),
            ("", 0),
            ("abc", 0),
            ("NaN", 0),
            ("Infinity", 0),
            (True, 0),
        ],
    )
    def test_values(self, value: object, expected: int) -> None:
        assert parse_amount(value) == expected


class TestParseTransaction:
    """parse_transaction 함수 테스트"""

    def test_full_record(self) -> None:
        """정상 레코드"""
        tx = parse_transaction(
            {
                "transaction_id": "0.0.1-1700000000-000000001",
                "consensus_timestamp": "1700000000.000000001",
                "name": "CRYPTOTRANSFER",
                "result": "SUCCESS",
                "transfers": [
                    {"account": "0.0.100", "amount": 500000000, "is_approval": False},
                    {"account": "0.0.999", "amount": -500000000, "is_approval": False},
                ],
            }
        )

        assert tx.transaction_id == "0.0.1-1700000000-000000001"
        assert tx.consensus_timestamp == "1700000000.000000001"
        assert tx.transfers == (
            MirrorTransfer(account="0.0.100", amount=500000000),
            MirrorTransfer(account="0.0.999", amount=-500000000),
        )
        assert tx.name == "CRYPTOTRANSFER"

    def test_missing_fields(self) -> None:
        """필드가 없어도 예외 없음"""
        tx = parse_transaction({})

        assert tx.transaction_id == ""
        assert tx.consensus_timestamp == ""
        assert tx.transfers == ()

    def test_bad_transfer_entries(self) -> None:
        """잘못된 항목은 무시하거나 0으로 취급"""
        tx = parse_transaction(
            {
                "transfers": [
                    "not-a-dict",
                    {"account": None, "amount": "oops"},
                    {"account": "0.0.5"},
                ]
            }
        )

        assert tx.transfers == (
            MirrorTransfer(account="", amount=0),
            MirrorTransfer(account="0.0.5", amount=0),
        )

    @pytest.mark.parametrize("transfers", [5, "0.0.5", {"account": "0.0.5"}, True])
    def test_non_list_transfers(self, transfers: object) -> None:
        """transfers가 목록이 아니면 빈 항목으로 취급"""
        tx = parse_transaction(
            {"transaction_id": "a", "consensus_timestamp": "1", "transfers": transfers}
        )

        assert tx.transaction_id == "a"
        assert tx.transfers == ()


class TestParseTransactionsResponse:
    """parse_transactions_response 함수 테스트"""

    def test_preserves_order(self) -> None:
        """API 반환 순서 유지"""
        data = {
            "transactions": [
                {"transaction_id": "b"},
                {"transaction_id": "a"},
            ],
            "links": {"next": None},
        }
        txs = parse_transactions_response(data)
        assert [tx.transaction_id for tx in txs] == ["b", "a"]

    def test_non_dict(self) -> None:
        """dict가 아니면 빈 목록"""
        assert parse_transactions_response(None) == []
        assert parse_transactions_response([1, 2]) == []

    def test_missing_transactions(self) -> None:
        """transactions 키 없음"""
        assert parse_transactions_response({}) == []

    def test_scalar_transfers_in_response(self) -> None:
        """한 트랜잭션의 transfers가 스칼라여도 전체 파싱은 계속"""
        data = {
            "transactions": [
                {"transaction_id": "a", "consensus_timestamp": "1", "transfers": 5},
                {"transaction_id": "b", "transfers": [{"account": "0.0.100", "amount": 1}]},
            ]
        }
        txs = parse_transactions_response(data)

        assert [tx.transaction_id for tx in txs] == ["a", "b"]
        assert txs[0].transfers == ()
        assert txs[1].transfers == (MirrorTransfer(account="0.0.100", amount=1),)
