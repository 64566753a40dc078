"""
pytest 공통 fixture 정의

secrets.yaml 임시 파일, Settings 싱글턴 초기화, Mirror 트랜잭션 생성 헬퍼
"""

import tempfile
from pathlib import Path
from typing import Any, Iterator

import pytest

from adapters.hedera.models import parse_transaction
from adapters.models import MirrorTransaction
from core.config.loader import Settings

TARGET = "0.0.100"
TRACKED = "0.0.200"
EXTERNAL = "0.0.999"

# 2023-11-14T22:13:20Z
TS_2023_11_14 = "1700000000.000000001"


def _make_tx(
    transaction_id: str,
    consensus_timestamp: str = TS_2023_11_14,
    transfers: list[tuple[str, Any]] | None = None,
) -> MirrorTransaction:
    """Mirror Node 트랜잭션 생성 (원본 JSON 경유)"""
    return parse_transaction(
        {
            "transaction_id": transaction_id,
            "consensus_timestamp": consensus_timestamp,
            "name": "CRYPTOTRANSFER",
            "result": "SUCCESS",
            "transfers": [
                {"account": account, "amount": amount}
                for account, amount in (transfers or [])
            ],
        }
    )


@pytest.fixture
def make_tx():
    """Mirror Node 트랜잭션 팩토리"""
    return _make_tx


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def reset_settings() -> Iterator[None]:
    """테스트마다 Settings 싱글턴 초기화"""
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def temp_secrets_file(temp_dir: Path) -> Path:
    """테스트용 secrets.yaml 파일 생성 (sandbox 모드)"""
    secrets_content = f"""# 테스트용 secrets.yaml
mode: sandbox

qbo:
  client_id: "test_client_id"
  client_secret: "test_client_secret"
  redirect_uri: "http://localhost:3000/callback"
  access_token: "test_access_token"
  refresh_token: "test_refresh_token"
  realm_id: "9130000000000001"

hedera:
  account: "{TARGET}"
  tracked_accounts:
    - "{TRACKED}"
  network: testnet
  page_size: 25
"""
    secrets_path = temp_dir / "secrets.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_production(temp_dir: Path) -> Path:
    """테스트용 secrets.yaml 파일 생성 (production 모드, hedera 섹션 생략)"""
    secrets_content = """mode: production

qbo:
  client_id: "prod_client_id"
  client_secret: "prod_client_secret"
"""
    secrets_path = temp_dir / "secrets_prod.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_invalid_mode(temp_dir: Path) -> Path:
    """잘못된 모드의 secrets.yaml 파일 생성"""
    secrets_content = """mode: invalid_mode

qbo:
  client_id: "test_client_id"
  client_secret: "test_client_secret"
"""
    secrets_path = temp_dir / "secrets_invalid.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path


@pytest.fixture
def temp_secrets_file_no_qbo(temp_dir: Path) -> Path:
    """qbo 섹션이 없는 secrets.yaml 파일 생성"""
    secrets_content = """mode: sandbox

hedera:
  account: "0.0.100"
"""
    secrets_path = temp_dir / "secrets_no_qbo.yaml"
    secrets_path.write_text(secrets_content, encoding="utf-8")
    return secrets_path
