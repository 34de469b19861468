import logging
import time
from typing import Iterable

from colorlog import ColoredFormatter

from datastreams._utils import get_loglevel


package_logger_name = 'datastreams'

log_format = '%(asctime)s %(log_color)s%(levelname)s%(reset)s %(name)s: %(message)s'

log_colors = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'bold_red',
}


class UTCColoredFormatter(ColoredFormatter):
    '''
    A ColoredFormatter that uses UTC for timestamps
    and formats them in ISO8601 with a trailing 'Z'.

    '''

    converter = time.gmtime

    def formatTime(self, record, datefmt=None):
        if datefmt:
            return super().formatTime(record, datefmt)

        ct = self.converter(record.created)
        t = time.strftime('%Y-%m-%dT%H:%M:%S', ct)
        return f'{t}Z'


def setup_logging(
    loglevel: str | None = None,
    silence: Iterable[str] = (),
    *,
    scoped: bool = False,
) -> logging.Handler:
    '''
    Install a single colored stream handler and return it.

    By default the handler goes on the root logger and replaces whatever is
    there. With `scoped=True` only the `datastreams` logger tree gets it and
    stops propagating, so an embedding application keeps its own root
    handlers while stream and table sink events still get printed.

    When `loglevel` is not passed it is read from `DATASTREAMS_LOGLEVEL`.

    '''
    loglevel = loglevel or get_loglevel()

    for noisy in silence:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    target = logging.getLogger(package_logger_name if scoped else None)

    # avoid duplicates if called twice
    target.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(UTCColoredFormatter(log_format, log_colors=log_colors))
    target.addHandler(handler)
    target.setLevel(loglevel.upper())

    if scoped:
        target.propagate = False

    return handler
