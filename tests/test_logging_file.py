import logging
from pathlib import Path

from toolengine.core.logging import attach_file_handler, summarize_for_log


def test_file_logging_creation(monkeypatch, tmp_path):
    log_dir = tmp_path / "logs"
    monkeypatch.setenv("TOOLENGINE_LOG_DIR", str(log_dir))
    monkeypatch.setenv("TOOLENGINE_LOG_LEVEL", "DEBUG")
    from toolengine.core.logging import get_logger
    logger = get_logger("toolengine.core.test_file_logging")
    logger.debug("test debug line")
    logger.info("info line")
    file_path = log_dir / "toolengine.log"
    assert file_path.exists()
    content = file_path.read_text(encoding="utf-8")
    assert "test debug line" in content
    assert "info line" in content


def test_attach_file_handler_is_idempotent(tmp_path):
    logger = logging.getLogger("toolengine.core.test_attach")
    try:
        first = attach_file_handler(logger, tmp_path)
        second = attach_file_handler(logger, tmp_path)
        assert first == second == (tmp_path / "toolengine.log").resolve()
        assert sum(isinstance(h, logging.FileHandler) for h in logger.handlers) == 1
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()


def test_summarize_for_log():
    assert summarize_for_log(3) == 3
    assert summarize_for_log("x" * 300)["len"] == 300
    assert summarize_for_log({"text": "hi", "n": 1}) == {
        "type": "dict",
        "len": 2,
        "keys": ["text", "n"],
        "value_types": {"text": "str", "n": "int"},
    }
    seq = summarize_for_log(list(range(20)), max_items=3)
    assert seq["len"] == 20 and seq["preview"] == ["0", "1", "2"]
    assert summarize_for_log(b"abc") == {"type": "bytes", "len": 3}
    assert summarize_for_log(Path("p")) == {"type": type(Path("p")).__name__}
