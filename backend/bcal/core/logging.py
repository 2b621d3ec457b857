"""
logging.py — b-cal Log Setup

Every module logs through `get_logger(__name__)`, so records carry the
emitting module (bcal.services.auth, bcal.repositories.users, ...) in a
single line: timestamp | level | module | message. The level comes from
`settings.LOG_LEVEL` and is applied once by `create_app()`.

What gets logged:
- INFO: signup, login, refresh, logout by user id; calendar entry created,
  updated or deleted by user id and entry id.
- WARNING: rejected signup (email already registered) and every rejected
  refresh (no session, superseded token, lost rotation race).
- ERROR: failed commits in the repositories, and unhandled 5xx errors in the
  exception handlers (the response body hides the detail).

Never logged: passwords, access or refresh tokens, stored digests, or the
signing secrets. Identify users by id; the email appears only on signup
rejection.
"""

import logging

# -----------------------------------------------------------------------------
# Log Format
# -----------------------------------------------------------------------------

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

# -----------------------------------------------------------------------------
# Root Logger Initialization
# -----------------------------------------------------------------------------

def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging settings.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"

    Should be called ONCE, from the app factory in `main.py`. Unknown level
    names fall back to INFO.
    """

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )

    logging.getLogger(__name__).info("Logging initialized with level %s", level)

# -----------------------------------------------------------------------------
# Logger Access Helper
# -----------------------------------------------------------------------------

def get_logger(name: str) -> logging.Logger:
    """
    Return a logger instance to be used in any module.

    In any module:
        from bcal.core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)
