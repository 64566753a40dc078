"""
Sync Bootstrap

설정 로드, 클라이언트 생성, 동기화 1회 실행.
결과 보고서는 stdout에 JSON으로 출력.

종료 코드:
- 0: 실행 완료 (트랜잭션 단위 실패가 있어도 0)
- 1: 설정 로드 실패 / 준비 단계 실패
- 2: 세션 없음 또는 회사 불일치 (재인증 필요)
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from adapters.hedera.mirror_client import MirrorRestClient
from adapters.interfaces import IMirrorClient, IQboClient
from adapters.qbo.rest_client import QboRestClient
from adapters.qbo.session import QboSession, QboToken
from core.config.loader import QboCredentials, Settings, get_settings
from core.domain.errors import SessionInvalid, SyncError
from core.logging import setup_logging
from sync.runner import SyncReport, SyncRunner

logger = logging.getLogger("sync")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_SESSION = 2


def build_session(credentials: QboCredentials) -> QboSession:
    """secrets.yaml의 토큰으로 세션 생성

    access_token 또는 realm_id가 없으면 빈 세션 (호출 시 SessionInvalid)
    """
    if not credentials.access_token or not credentials.realm_id:
        return QboSession()

    token = QboToken(
        access_token=credentials.access_token,
        realm_id=credentials.realm_id,
        refresh_token=credentials.refresh_token,
    )
    return QboSession(token=token, bound_realm_id=credentials.realm_id)


def build_runner(
    settings: Settings,
    session: QboSession,
    mirror: IMirrorClient,
    qbo: IQboClient,
) -> SyncRunner:
    """설정값으로 SyncRunner 생성"""
    return SyncRunner(
        mirror=mirror,
        qbo=qbo,
        tracked_accounts=settings.tracked_accounts,
        session=session,
        page_size=settings.page_size,
        mirror_base_url=settings.mirror_base_url,
    )


async def run_once(
    settings: Settings,
    session: QboSession,
    account: str | None = None,
    limit: int | None = None,
) -> SyncReport:
    """실제 클라이언트로 동기화 1회 실행 (클라이언트는 종료 시 정리)"""
    mirror = MirrorRestClient(settings.mirror_base_url)
    qbo = QboRestClient(session, settings.qbo_base_url)

    try:
        runner = build_runner(settings, session, mirror, qbo)
        return await runner.run(account or settings.target_account, limit=limit)
    finally:
        await mirror.close()
        await qbo.close()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """CLI 인자 파싱"""
    parser = argparse.ArgumentParser(
        prog="python -m sync",
        description="Hedera → QuickBooks Online 동기화 (1회 실행)",
    )
    parser.add_argument(
        "--account",
        default=None,
        help="동기화 대상 Hedera 계정 (기본: secrets.yaml의 hedera.account)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Mirror Node 조회 개수 (기본: hedera.page_size)",
    )
    parser.add_argument(
        "--secrets",
        type=Path,
        default=None,
        help="secrets.yaml 경로",
    )
    return parser.parse_args(argv)


async def main(argv: Sequence[str] | None = None) -> int:
    """Sync 메인 함수

    Returns:
        종료 코드
    """
    args = parse_args(argv)
    setup_logging("sync")

    try:
        settings = get_settings(args.secrets)
    except Exception as e:
        logger.error(f"설정 로드 실패: {e}")
        return EXIT_FAILED

    logger.info(f"Mode: {settings.mode.value}")
    logger.info(f"Mirror: {settings.mirror_base_url}")

    session = build_session(settings.qbo)

    try:
        report = await run_once(settings, session, args.account, args.limit)
    except SessionInvalid as e:
        logger.error(f"QBO 세션 오류 (재인증 필요): {e.message}")
        print(json.dumps({"error": e.to_dict()}, ensure_ascii=False, indent=2, default=str))
        return EXIT_SESSION
    except SyncError as e:
        logger.error(f"동기화 중단: {e.message}", extra={"kind": e.kind})
        print(json.dumps({"error": e.to_dict()}, ensure_ascii=False, indent=2, default=str))
        return EXIT_FAILED

    print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2, default=str))
    return EXIT_OK


def cli() -> None:
    """콘솔 스크립트 진입점"""
    sys.exit(asyncio.run(main()))
