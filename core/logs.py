"""Logging setup for the plugin process.

The host reads the plugin's stderr, so when serving each record is written
as one JSON object per line.
"""

import json
import logging
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """Format records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            '@level': record.levelname.lower(),
            '@message': record.getMessage(),
            '@module': record.name,
            '@timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
        }
        if record.exc_info:
            entry['error'] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(level: int = logging.INFO, json_format: bool = False):
    """Configure the root logger to write to stderr.

    Args:
        level: Minimum level to emit
        json_format: If True, emit one JSON object per record
    """
    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(levelname)s %(name)s: %(message)s'))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)
