import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from chat_core.config.settings import settings


class JsonFormatter(logging.Formatter):
    def __init__(self, redact: bool = False):
        super().__init__()
        self._redact = redact

    def format(self, record: logging.LogRecord) -> str:
        msg = record.getMessage()
        if self._redact:
            msg = (msg or "")[:64]
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": msg,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logger(cfg=settings) -> logging.Logger:
    logger = logging.getLogger("chat_core")
    logger.setLevel(getattr(logging, str(cfg.log_level).upper(), logging.INFO))
    if logger.handlers:
        return logger
    if cfg.log_dir:
        log_dir = Path(cfg.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_dir / "chat.log", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter(redact=cfg.log_redact_content))
    logger.addHandler(handler)
    return logger


logger = setup_logger()
