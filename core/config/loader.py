"""
설정 로더

secrets.yaml 로드 및 QBO / Mirror Node 설정 생성
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from core.constants import Defaults, MirrorEndpoints, Paths, QboEndpoints
from core.types import MirrorNetwork, QboEnvironment


@dataclass(frozen=True)
class QboCredentials:
    """QBO OAuth 설정

    access_token / realm_id는 CLI 실행 시에만 사용 (Web은 OAuth 콜백으로 획득)
    """

    client_id: str
    client_secret: str
    redirect_uri: str
    access_token: str = ""
    refresh_token: str = ""
    realm_id: str = ""


@dataclass(frozen=True)
class HederaConfig:
    """추적 대상 Hedera 계정 설정"""

    account: str
    tracked_accounts: tuple[str, ...]
    network: MirrorNetwork
    page_size: int


@dataclass(frozen=True)
class Secrets:
    """보안 설정 (secrets.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    mode: QboEnvironment
    qbo: QboCredentials
    hedera: HederaConfig


class SecretsLoadError(Exception):
    """Secrets 로드 실패 예외"""

    pass


def parse_account_list(value: Any) -> list[str]:
    """계정 목록 파싱 (YAML 리스트 또는 콤마 구분 문자열)

    Example:
        >>> parse_account_list("0.0.1, 0.0.2,,")
        ['0.0.1', '0.0.2']
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)
    return [str(item).strip() for item in items if str(item).strip()]


def _load_hedera(data: dict[str, Any]) -> HederaConfig:
    """hedera 섹션 로드 (모두 선택 항목)"""
    account = str(data.get("account") or Defaults.HEDERA_ACCOUNT).strip()

    tracked = parse_account_list(data.get("tracked_accounts"))
    if account not in tracked:
        tracked.insert(0, account)

    network_str = data.get("network") or Defaults.MIRROR_NETWORK
    try:
        network = MirrorNetwork(network_str)
    except ValueError as e:
        valid = [n.value for n in MirrorNetwork]
        raise ValueError(
            f"유효하지 않은 network입니다: '{network_str}'. 유효한 값: {valid}"
        ) from e

    page_size = data.get("page_size", Defaults.PAGE_SIZE)
    try:
        page_size = int(page_size)
    except (TypeError, ValueError) as e:
        raise SecretsLoadError(f"hedera.page_size가 정수가 아닙니다: {page_size!r}") from e
    if page_size <= 0:
        raise SecretsLoadError(f"hedera.page_size는 1 이상이어야 합니다: {page_size}")

    return HederaConfig(
        account=account,
        tracked_accounts=tuple(tracked),
        network=network,
        page_size=page_size,
    )


def load_secrets(path: Path | None = None) -> Secrets:
    """secrets.yaml 파일 로드

    Args:
        path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Secrets 인스턴스

    Raises:
        SecretsLoadError: 파일이 없거나 형식이 잘못된 경우
        ValueError: 유효하지 않은 mode / network인 경우
    """
    if path is None:
        path = Paths.SECRETS_FILE

    if not path.exists():
        raise SecretsLoadError(f"secrets.yaml 파일을 찾을 수 없습니다: {path}")

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SecretsLoadError(f"secrets.yaml 파싱 실패: {e}") from e

    if data is None:
        raise SecretsLoadError("secrets.yaml이 비어 있습니다")

    # mode 검증
    mode_str = data.get("mode")
    if mode_str is None:
        raise SecretsLoadError("secrets.yaml에 'mode' 필드가 없습니다")

    try:
        mode = QboEnvironment(mode_str)
    except ValueError as e:
        valid_modes = [m.value for m in QboEnvironment]
        raise ValueError(
            f"유효하지 않은 mode입니다: '{mode_str}'. "
            f"유효한 값: {valid_modes}"
        ) from e

    qbo_config = data.get("qbo")
    if qbo_config is None:
        raise SecretsLoadError("secrets.yaml에 'qbo' 설정이 없습니다")

    client_id = qbo_config.get("client_id")
    client_secret = qbo_config.get("client_secret")

    if not client_id:
        raise SecretsLoadError("secrets.yaml의 qbo 섹션에 'client_id'가 없습니다")
    if not client_secret:
        raise SecretsLoadError("secrets.yaml의 qbo 섹션에 'client_secret'가 없습니다")

    redirect_uri = qbo_config.get("redirect_uri") or (
        f"http://localhost:{Defaults.WEB_PORT}/callback"
    )

    qbo = QboCredentials(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=redirect_uri,
        access_token=qbo_config.get("access_token") or "",
        refresh_token=qbo_config.get("refresh_token") or "",
        realm_id=str(qbo_config.get("realm_id") or ""),
    )

    return Secrets(
        mode=mode,
        qbo=qbo,
        hedera=_load_hedera(data.get("hedera") or {}),
    )


def get_qbo_base_url(mode: QboEnvironment) -> str:
    """모드에 따른 QBO API 베이스 URL"""
    if mode == QboEnvironment.PRODUCTION:
        return QboEndpoints.PROD_API_URL
    return QboEndpoints.SANDBOX_API_URL


def get_mirror_base_url(network: MirrorNetwork) -> str:
    """네트워크에 따른 Mirror Node 베이스 URL"""
    if network == MirrorNetwork.MAINNET:
        return MirrorEndpoints.MAINNET_URL
    return MirrorEndpoints.TESTNET_URL


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    secrets.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _secrets: Secrets | None = None

    def __new__(cls, secrets_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, secrets_path: Path | None = None) -> None:
        if self._secrets is None:
            self._secrets = load_secrets(secrets_path)

    @property
    def mode(self) -> QboEnvironment:
        """현재 QBO 환경"""
        assert self._secrets is not None
        return self._secrets.mode

    @property
    def qbo(self) -> QboCredentials:
        """QBO OAuth 설정"""
        assert self._secrets is not None
        return self._secrets.qbo

    @property
    def hedera(self) -> HederaConfig:
        """Hedera 설정"""
        assert self._secrets is not None
        return self._secrets.hedera

    @property
    def target_account(self) -> str:
        """기본 동기화 대상 계정"""
        return self.hedera.account

    @property
    def tracked_accounts(self) -> frozenset[str]:
        """추적 계정 집합 (대상 계정 포함)"""
        return frozenset(self.hedera.tracked_accounts)

    @property
    def page_size(self) -> int:
        """Mirror Node 조회 개수"""
        return self.hedera.page_size

    @property
    def qbo_base_url(self) -> str:
        """현재 모드의 QBO API URL"""
        return get_qbo_base_url(self.mode)

    @property
    def mirror_base_url(self) -> str:
        """현재 네트워크의 Mirror Node URL"""
        return get_mirror_base_url(self.hedera.network)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._secrets = None


def get_settings(secrets_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        secrets_path: secrets.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(secrets_path)
