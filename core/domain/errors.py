"""
동기화 에러 분류

모든 실패는 kind + message + payload 형태의 구조화된 데이터로 호출자에게 전달.

- UpstreamUnavailable: Mirror/QBO 전송 계층 또는 HTTP 실패
- BackendRejected: QBO가 Fault를 반환 (HTTP 200이어도 동일)
- SessionInvalid: 인증 세션 없음 또는 회사(realm) 불일치
"""

from typing import Any


class SyncError(Exception):
    """동기화 에러 베이스

    Args:
        message: 에러 메시지
        payload: 원본 진단 데이터 (Fault 본문, HTTP 응답 등)
    """

    kind: str = "SyncError"

    def __init__(self, message: str, payload: Any = None):
        self.message = message
        self.payload = payload
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """구조화된 에러 정보"""
        return {
            "kind": self.kind,
            "message": self.message,
            "payload": self.payload,
        }


class UpstreamUnavailable(SyncError):
    """외부 서비스 호출 실패 (전송 오류, 비 2xx 응답)

    Args:
        message: 에러 메시지
        status_code: HTTP 상태 코드 (전송 오류면 None)
        payload: 응답 본문
    """

    kind = "UpstreamUnavailable"

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None):
        self.status_code = status_code
        super().__init__(message, payload)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class BackendRejected(SyncError):
    """QBO 의미 오류 (Fault)

    잘못된 계정 참조, 검증 실패 등. 자동 재시도하지 않음.
    """

    kind = "BackendRejected"


class SessionInvalid(SyncError):
    """세션 없음 / 회사 컨텍스트 불일치

    어떤 QBO 호출도 하기 전에 전체 작업을 중단해야 함.
    """

    kind = "SessionInvalid"
