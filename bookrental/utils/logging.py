# bookrental/utils/logging.py
import logging
import sys

from bookrental.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _root_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT))
    return handler


_root = logging.getLogger("bookrental")
if not _root.handlers:
    _root.addHandler(_root_handler())
    _root.setLevel(LOG_LEVEL)


def get_logger(name: str) -> logging.Logger:
    #wszystkie loggery pod "bookrental" dziela jeden handler
    if not name.startswith("bookrental"):
        name = f"bookrental.{name}"
    return logging.getLogger(name)
