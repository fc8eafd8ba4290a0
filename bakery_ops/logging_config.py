from __future__ import annotations

import json
import logging
import sys

from bakery_ops.config import settings

HUMAN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'ts': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'msg': record.getMessage(),
            'module': record.module,
            'line': record.lineno,
        }
        if record.exc_info:
            payload['exc'] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: str | None = None, *, json_output: bool | None = None) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    use_json = settings.log_json if json_output is None else json_output
    handler.setFormatter(JSONFormatter() if use_json else logging.Formatter(HUMAN_FORMAT))
    root_logger.addHandler(handler)
