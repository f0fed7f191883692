"""Application-wide JSON logging

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

One JSON document per line on stdout (CloudWatch picks up each line as an event).
Fields passed through `extra=` are attached next to the standard ones:

    >>> logger.info('Resolved short code. Responding with 200.', extra={'short_code': 'bvK70A', 'event': 'QUERY_SUCCESS'})
    {"timestamp": "2025-12-26T12:00:00.000Z", "level": "INFO", "logger": "shorturl.lambdas.query_url.app",
     "message": "Resolved short code. Responding with 200.", "short_code": "bvK70A", "event": "QUERY_SUCCESS"}

Warnings logged with `exc_info=True` (e.g. cache degradation in shorturl.service)
carry the formatted traceback under "exc_info".
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shorturl.constants import ENV


# AWS SDK and connection pool chatter stays out of the application logs below WARNING
QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')


def _record_attributes() -> frozenset[str]:
    blank = logging.LogRecord('', logging.NOTSET, '', 0, '', None, None)
    return frozenset(vars(blank)) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras"""

    STANDARD_ATTRS = _record_attributes()

    @staticmethod
    def timestamp(record: logging.LogRecord) -> str:
        """UTC ISO-8601 with milliseconds and a 'Z' suffix"""
        created = datetime.fromtimestamp(record.created, tz=UTC)
        return created.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': self.timestamp(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        log.update((key, value) for key, value in vars(record).items() if key not in self.STANDARD_ATTRS)

        if record.exc_info:
            log['exc_info'] = self.formatException(record.exc_info)

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in QUIET_LOGGERS},
            'root': {'level': log_level, 'handlers': ['stdout']},
        }
    )
