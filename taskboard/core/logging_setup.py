import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Give the root logger a stderr handler if nothing else configured it.

    Call this once from the process entry point. Handlers that are already
    installed (uvicorn's --log-config, pytest's capture) are left alone.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

    # SQL statements are only wanted when SQL_ECHO is on
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
