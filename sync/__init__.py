"""
Hedera → QBO 동기화

- classifier: 트랜잭션 방향/금액 분류
- resolver: QBO 중복 확인
- writer: QBO 레코드 생성
- runner: 배치 실행기
- listing: 읽기 전용 목록 조회
"""

from sync.classifier import Classification, classify
from sync.effects import AccountingEffect, EffectDescriptor
from sync.resolver import DuplicateResolver
from sync.runner import DuplicateGuard, RunOutcome, SyncReport, SyncRunner
from sync.writer import EffectWriter

__all__ = [
    "Classification",
    "classify",
    "AccountingEffect",
    "EffectDescriptor",
    "DuplicateResolver",
    "EffectWriter",
    "DuplicateGuard",
    "RunOutcome",
    "SyncReport",
    "SyncRunner",
]
