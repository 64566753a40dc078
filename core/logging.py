"""
로깅 설정

setup_logging("sync")  # python -m sync
setup_logging("web")   # python -m web (web.app import 시)

콘솔 + logs/<process>/<process>.log (자정마다 교체, 7일 보관).
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.constants import Paths

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_BACKUP_COUNT = 7

# WARNING 미만은 버리는 라이브러리 로거 (httpx는 URL에 query를 그대로 남김)
NOISY_LOGGERS = ("httpcore", "httpx", "asyncio", "uvicorn.access")

_LOG_DIRS: dict[str, Path] = {
    "sync": Paths.SYNC_LOGS_DIR,
    "web": Paths.WEB_LOGS_DIR,
}


def get_log_dir(process_name: str) -> Path:
    """프로세스별 로그 디렉토리 (알 수 없는 이름은 logs/)"""
    return _LOG_DIRS.get(process_name, Paths.LOGS_DIR)


def _daily_file_handler(log_file: Path) -> TimedRotatingFileHandler:
    handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.suffix = "%Y-%m-%d"
    return handler


def setup_logging(
    process_name: str,
    level: int = logging.INFO,
    log_dir: Path | None = None,
) -> logging.Logger:
    """루트 로거에 콘솔/파일 핸들러 설정 (재호출 시 기존 핸들러 교체)

    Args:
        process_name: "sync" 또는 "web"
        level: 핸들러 레벨
        log_dir: 로그 디렉토리 (None이면 get_log_dir)

    Returns:
        루트 Logger
    """
    log_dir = log_dir or get_log_dir(process_name)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{process_name}.log"

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(sys.stdout),
        _daily_file_handler(log_file),
    ]

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    root_logger.info(f"로깅 초기화 완료: {process_name} → {log_file}")
    return root_logger
