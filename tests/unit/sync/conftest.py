"""
동기화 테스트 픽스처

Mock 클라이언트와 인증된 세션, 계정 Id 조회 헬퍼 제공.
"""

import pytest

from adapters.mock.mirror_client import MockMirrorClient
from adapters.mock.qbo_client import MockQboClient
from adapters.qbo.session import QboSession, QboToken

REALM_ID = "9130000000000001"


@pytest.fixture
def mock_mirror() -> MockMirrorClient:
    """Mock Mirror Node 클라이언트"""
    return MockMirrorClient()


@pytest.fixture
def mock_qbo() -> MockQboClient:
    """Mock QBO 클라이언트"""
    return MockQboClient()


@pytest.fixture
def qbo_session() -> QboSession:
    """인증된 QBO 세션"""
    token = QboToken(access_token="access-123", realm_id=REALM_ID)
    return QboSession(token=token, bound_realm_id=REALM_ID)


@pytest.fixture
def account_id_of(mock_qbo: MockQboClient):
    """QBO 계정 이름 → Id"""

    def _lookup(name: str) -> str:
        for record in mock_qbo.records("Account"):
            if record["Name"] == name:
                return record["Id"]
        raise KeyError(name)

    return _lookup
