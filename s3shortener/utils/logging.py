"""Structured JSON logs for CloudWatch

Each lambda package calls `initialize_logging()` from its `__init__.py`, before
the handler module (and its module-level loggers) is imported. Every record then
becomes one JSON line; fields passed via `extra=` land at the top level so
CloudWatch Logs Insights can filter on them:

    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "WARNING",
     "logger": "s3shortener.services.shortener_service",
     "message": "Shortcode collision. Regenerating code.",
     "location": "shortener_service.py:149", "code": "aZ3kP9xQ", "attempt": 1}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from s3shortener.constants import ENV


# Attributes every LogRecord carries; anything else on a record came from `extra=`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None))) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': datetime.fromtimestamp(record.created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.levelno >= logging.WARNING:
            log['location'] = f'{record.filename}:{record.lineno}'

        log.update((key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS)

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)

        # extras may hold datetimes, enums, exceptions...
        return json.dumps(log, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Route the root logger to stdout as JSON at `level` (defaults to $LOG_LEVEL, then INFO)."""
    level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {'class': 'logging.StreamHandler', 'formatter': 'json', 'stream': 'ext://sys.stdout'},
            },
            'root': {'level': level, 'handlers': ['stdout']},
            # boto logs every signed request on DEBUG
            'loggers': {name: {'level': 'WARNING'} for name in ('boto3', 'botocore', 'urllib3')},
        }
    )
