"""app_logger 설정 테스트."""

from __future__ import annotations

import logging

import pytest

from src.services.app_logger import setup_logging


@pytest.fixture
def clean_logger():
    root = logging.getLogger("src")
    saved = list(root.handlers)
    root.handlers.clear()
    yield root
    for h in root.handlers:
        h.close()
    root.handlers[:] = saved


def test_writes_to_log_file(tmp_path, clean_logger):
    log_path = tmp_path / "clipdeck.log"
    setup_logging(log_path=log_path)
    logging.getLogger("src.services.load_pipeline").info("hello from pipeline")
    for h in clean_logger.handlers:
        h.flush()
    assert "hello from pipeline" in log_path.read_text(encoding="utf-8")


def test_idempotent(tmp_path, clean_logger):
    setup_logging(log_path=tmp_path / "a.log")
    setup_logging(log_path=tmp_path / "b.log")
    assert len(clean_logger.handlers) == 2
    assert not (tmp_path / "b.log").exists()
