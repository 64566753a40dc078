"""
QBO 세션 컨텍스트

인증 토큰과 회사(realm) 바인딩을 명시적인 객체로 관리.
모든 QBO 호출은 require_realm()으로 세션을 검증한 뒤 진행.

realm 규칙:
- 토큰이 없거나 토큰에 realm이 없으면 SessionInvalid
- 콜백에서 관찰한 realm과 토큰 realm이 다르면 SessionInvalid (재인증 필요)
- 콜백에서 다른 회사로 바뀌면 기존 토큰을 폐기하고 새 realm으로 재바인딩
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from core.domain.errors import SessionInvalid
from core.utils.timezone import now_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QboToken:
    """OAuth 토큰

    Attributes:
        access_token: Bearer 토큰
        realm_id: 토큰이 발급된 회사 ID
        refresh_token: 갱신 토큰
        expires_at: 만료 시각 (UTC, 알 수 없으면 None)
    """

    access_token: str
    realm_id: str
    refresh_token: str = ""
    expires_at: datetime | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_response(cls, data: dict[str, Any], realm_id: str) -> "QboToken":
        """토큰 엔드포인트 응답으로 생성"""
        expires_in = data.get("expires_in")
        expires_at = None
        if expires_in:
            expires_at = now_utc() + timedelta(seconds=int(expires_in))

        return cls(
            access_token=data.get("access_token", ""),
            realm_id=realm_id,
            refresh_token=data.get("refresh_token", ""),
            expires_at=expires_at,
            raw=data,
        )

    @property
    def is_expired(self) -> bool:
        """만료 여부 (만료 시각을 모르면 False)"""
        if self.expires_at is None:
            return False
        return now_utc() >= self.expires_at


class QboSession:
    """QBO 인증 세션

    프로세스 전역으로 하나만 두되, 전역 변수가 아닌
    의존성 주입으로 전달한다.

    Args:
        token: 초기 토큰 (CLI 실행 시 secrets.yaml에서 로드)
        bound_realm_id: 바인딩된 회사 ID
    """

    def __init__(
        self,
        token: QboToken | None = None,
        bound_realm_id: str | None = None,
    ):
        self._token = token
        self._bound_realm_id = bound_realm_id

    @property
    def token(self) -> QboToken | None:
        """현재 토큰"""
        return self._token

    @property
    def bound_realm_id(self) -> str | None:
        """콜백에서 관찰한 회사 ID"""
        return self._bound_realm_id

    @property
    def is_authenticated(self) -> bool:
        """토큰 보유 여부"""
        return self._token is not None and bool(self._token.access_token)

    def observe_realm(self, realm_id: str | None) -> bool:
        """OAuth 콜백에서 받은 realm 관찰

        다른 회사로 바뀌면 기존 토큰을 폐기한다.

        Returns:
            회사가 변경되었는지 여부
        """
        if not realm_id:
            return False

        changed = self._bound_realm_id is not None and self._bound_realm_id != realm_id
        if changed:
            logger.warning(
                f"Realm changed {self._bound_realm_id} -> {realm_id}. 세션 초기화",
            )
            self.invalidate()

        self._bound_realm_id = realm_id
        return changed

    def set_token(self, token: QboToken) -> None:
        """새 토큰 저장"""
        self._token = token
        if self._bound_realm_id is None:
            self._bound_realm_id = token.realm_id
        logger.info(f"QBO 토큰 설정: realm={token.realm_id}")

    def invalidate(self) -> None:
        """토큰 폐기"""
        if self._token is not None:
            logger.info("QBO 토큰 폐기")
        self._token = None

    def require_realm(self) -> str:
        """API 호출용 realm 반환 (항상 토큰의 realm 사용)

        Raises:
            SessionInvalid: 미인증, 토큰 realm 없음, realm 불일치
        """
        token = self._token
        if token is None or not token.access_token:
            raise SessionInvalid("Not authenticated (no token)")

        if not token.realm_id:
            raise SessionInvalid("Token missing realmId")

        if self._bound_realm_id and self._bound_realm_id != token.realm_id:
            raise SessionInvalid(
                f"Realm mismatch: bound realm={self._bound_realm_id} "
                f"vs token.realmId={token.realm_id}. Re-authorize.",
                payload={
                    "bound_realm_id": self._bound_realm_id,
                    "token_realm_id": token.realm_id,
                },
            )

        return token.realm_id

    def debug_info(self) -> dict[str, Any]:
        """디버그용 세션 상태"""
        return {
            "bound_realm_id": self._bound_realm_id,
            "token_realm_id": self._token.realm_id if self._token else None,
            "has_token": self.is_authenticated,
            "expired": self._token.is_expired if self._token else None,
        }
