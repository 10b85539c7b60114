from __future__ import annotations
import logging

# Third-party loggers that flood the console at DEBUG
NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "multipart", "httpx")


def setup_console_logging(level: int | None = None) -> None:
    """
    Call once at app start. Service logs go to the console at ``level``
    (``LOG_LEVEL`` from config when omitted); chatty libraries stay at WARNING.
    """
    if level is None:
        from satprep.config import LOG_LEVEL

        level = LOG_LEVEL

    root = logging.getLogger()
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    if root.handlers:
        root.setLevel(level)
        return

    root.setLevel(level)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)
