import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stream handler on the root logger.
    Safe to call more than once (e.g. app factory in tests).
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in root.handlers:
        if getattr(h, "_plant_care_handler", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._plant_care_handler = True
    root.addHandler(handler)
