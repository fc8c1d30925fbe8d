import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(process)d] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(stream=sys.stdout, level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)
    logging.getLogger("users_api").setLevel(resolved)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
