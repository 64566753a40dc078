"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent


class MirrorEndpoints:
    """Hedera Mirror Node REST 엔드포인트 (고정값)

    공식 문서: https://docs.hedera.com/hedera/sdks-and-apis/rest-api
    """

    MAINNET_URL: str = "https://mainnet.mirrornode.hedera.com/api/v1"
    TESTNET_URL: str = "https://testnet.mirrornode.hedera.com/api/v1"


class QboEndpoints:
    """QuickBooks Online API 엔드포인트 (고정값)"""

    PROD_API_URL: str = "https://quickbooks.api.intuit.com"
    SANDBOX_API_URL: str = "https://sandbox-quickbooks.api.intuit.com"

    # OAuth2 (환경 공통)
    AUTHORIZE_URL: str = "https://appcenter.intuit.com/connect/oauth2"
    TOKEN_URL: str = "https://oauth.platform.intuit.com/oauth2/v1/tokens/bearer"

    # 스코프
    SCOPE_ACCOUNTING: str = "com.intuit.quickbooks.accounting"
    SCOPE_OPENID: str = "openid"

    MINOR_VERSION: int = 75


class Defaults:
    """기본값 상수"""

    HEDERA_ACCOUNT: str = "0.0.6856591"
    MIRROR_NETWORK: str = "testnet"
    PAGE_SIZE: int = 25

    # Idempotency key 네임스페이스 (PrivateNote에 기록)
    KEY_NAMESPACE: str = "hedera"

    # 같은 날짜 후보 조회 상한 (초과 시 일부 중복을 놓칠 수 있음)
    CANDIDATE_QUERY_CAP: int = 200

    # 목록 조회 기본 개수
    LIST_ACCOUNTS_LIMIT: int = 200
    LIST_RECORDS_LIMIT: int = 50

    # 1 HBAR = 10^8 tinybar
    TINYBAR_PER_HBAR: int = 100_000_000

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 3000

    HTTP_TIMEOUT_SEC: float = 30.0

    # OAuth state 보관 (미사용 authorize 링크 정리)
    OAUTH_STATE_TTL_SEC: float = 600.0
    OAUTH_STATE_MAX: int = 100


class LedgerAccountNames:
    """QBO에 생성하는 계정 이름/유형"""

    WALLET_PREFIX: str = "Hedera"
    WALLET_TYPE: str = "Bank"

    CLEARING_NAME: str = "Hedera Clearing"
    CLEARING_TYPE: str = "Income"

    OUTFLOW_NAME: str = "External Hedera Outflow"
    OUTFLOW_TYPE: str = "Bank"


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    SYNC_LOGS_DIR: Path = LOGS_DIR / "sync"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"

    # 설정 파일
    SECRETS_FILE: Path = CONFIG_DIR / "secrets.yaml"
