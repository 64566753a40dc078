"""
어댑터 테스트 픽스처

공통 테스트 설정 및 픽스처 제공.
"""

from unittest.mock import MagicMock

import pytest

from adapters.mock.mirror_client import MockMirrorClient
from adapters.mock.qbo_client import MockQboClient
from adapters.qbo.session import QboSession, QboToken

REALM_ID = "9130000000000001"


def make_response(
    status_code: int = 200,
    json_body: object = None,
    text: str = "",
    invalid_json: bool = False,
) -> MagicMock:
    """httpx.Response 모킹"""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    if invalid_json:
        response.json.side_effect = ValueError("invalid json")
    else:
        response.json.return_value = json_body
    return response


@pytest.fixture
def response_factory():
    """httpx 응답 팩토리"""
    return make_response


@pytest.fixture
def qbo_session() -> QboSession:
    """인증된 QBO 세션"""
    token = QboToken(access_token="access-123", realm_id=REALM_ID, refresh_token="refresh-456")
    return QboSession(token=token, bound_realm_id=REALM_ID)


@pytest.fixture
def mock_mirror() -> MockMirrorClient:
    """Mock Mirror Node 클라이언트"""
    return MockMirrorClient()


@pytest.fixture
def mock_qbo() -> MockQboClient:
    """Mock QBO 클라이언트"""
    return MockQboClient()
