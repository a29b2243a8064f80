"""Lightweight logging setup for the core framework.

Users can override the log level with the TOOLENGINE_LOG_LEVEL env var and
add a log file with TOOLENGINE_LOG_DIR.

Also includes a helper to summarize tool inputs and outputs for logging
without dumping full payloads to the logs.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _summarize_sequence(seq: Any, max_items: int) -> Dict[str, Any]:
    out: Dict[str, Any] = {"type": type(seq).__name__, "len": len(seq)}
    items = list(seq)[:max_items]
    out["preview_types"] = [type(x).__name__ for x in items]
    prev_vals = []
    for x in items:
        s = str(x)
        if len(s) > 120:
            s = s[:117] + "..."
        prev_vals.append(s)
    out["preview"] = prev_vals
    return out


def summarize_for_log(obj: Any, *, max_items: int = 8) -> Any:
    """Return a compact, JSON-serializable summary suitable for logging.

    - Dict: size, keys (truncated) and value types (not full values)
    - List/Tuple/Set: length and a short preview of types/values
    - str: length and truncated preview
    - bytes/bytearray: length
    - Other scalars: returned directly; anything else reduces to its type name
    """
    if obj is None or isinstance(obj, (bool, int, float)):
        return obj
    if isinstance(obj, str):
        return {"type": "str", "len": len(obj), "preview": (obj if len(obj) <= 200 else obj[:197] + "...")}
    if isinstance(obj, (bytes, bytearray)):
        return {"type": type(obj).__name__, "len": len(obj)}
    if isinstance(obj, dict):
        keys = list(obj.keys())[:max_items]
        return {
            "type": "dict",
            "len": len(obj),
            "keys": [str(k) for k in keys],
            "value_types": {str(k): type(obj[k]).__name__ for k in keys},
        }
    if isinstance(obj, (list, tuple, set)):
        return _summarize_sequence(obj, max_items=max_items)
    return {"type": type(obj).__name__}


def attach_file_handler(logger: logging.Logger, log_dir: str | Path) -> Path:
    """Add a toolengine.log file handler under log_dir (idempotent per file)."""
    p = Path(log_dir)
    p.mkdir(parents=True, exist_ok=True)
    file_path = (p / "toolengine.log").resolve()
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and Path(h.baseFilename) == file_path:
            return file_path
    fh = logging.FileHandler(file_path, encoding="utf-8")
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(fh)
    return file_path


def get_logger(name: str = "toolengine") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream_handler)
        # Optional file handler if TOOLENGINE_LOG_DIR is set
        log_dir = os.getenv("TOOLENGINE_LOG_DIR")
        if log_dir:
            attach_file_handler(logger, log_dir)
        logger.setLevel(os.getenv("TOOLENGINE_LOG_LEVEL", "INFO").upper())
        logger.propagate = False
    return logger


core_logger = get_logger("toolengine.core")

__all__ = ["get_logger", "attach_file_handler", "core_logger", "summarize_for_log", "LOG_FORMAT"]
