"""
로깅 설정 테스트
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Iterator

import pytest

from core.constants import Paths
from core.logging import NOISY_LOGGERS, get_log_dir, setup_logging


@pytest.fixture
def restore_root_logger() -> Iterator[None]:
    """테스트 후 루트 로거 핸들러 복원"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogDir:
    """프로세스별 로그 디렉토리"""

    def test_known_processes(self) -> None:
        assert get_log_dir("sync") == Paths.SYNC_LOGS_DIR
        assert get_log_dir("web") == Paths.WEB_LOGS_DIR

    def test_unknown_process(self) -> None:
        assert get_log_dir("other") == Paths.LOGS_DIR


class TestSetupLogging:
    """setup_logging 테스트"""

    def test_handlers_and_file(self, temp_dir: Path, restore_root_logger: None) -> None:
        root = setup_logging("sync", log_dir=temp_dir / "sync")

        assert len(root.handlers) == 2
        file_handlers = [h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].backupCount == 7

        logging.getLogger("sync.test").info("기록 확인")
        file_handlers[0].flush()

        log_file = temp_dir / "sync" / "sync.log"
        assert log_file.exists()
        assert "기록 확인" in log_file.read_text(encoding="utf-8")

    def test_repeat_does_not_duplicate(self, temp_dir: Path, restore_root_logger: None) -> None:
        setup_logging("web", log_dir=temp_dir)
        root = setup_logging("web", log_dir=temp_dir)

        assert len(root.handlers) == 2

    def test_noisy_loggers_quieted(self, temp_dir: Path, restore_root_logger: None) -> None:
        setup_logging("sync", log_dir=temp_dir)

        for name in NOISY_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_level_applies_to_root_and_handlers(
        self, temp_dir: Path, restore_root_logger: None
    ) -> None:
        root = setup_logging("sync", level=logging.DEBUG, log_dir=temp_dir)

        assert root.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in root.handlers)
        assert next(h for h in root.handlers if isinstance(h, TimedRotatingFileHandler)).suffix == "%Y-%m-%d"
