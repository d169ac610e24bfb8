import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %d", name, raw, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Config:
    store_path: str = "sessions.json"
    database_url: str | None = None
    user_id: str | None = None
    log_format: str = "json"
    default_window: str = "week"
    weekly_target: int = 5
    session_minutes: float = 60.0
    taxonomy_path: str | None = None

    @classmethod
    def from_env(cls) -> "Config":
        database_url = os.environ.get("DATABASE_URL", "").strip() or None
        user_id = os.environ.get("GYMLOG_USER_ID", "").strip() or None
        return cls(
            store_path=os.environ.get("GYMLOG_STORE_PATH", "sessions.json"),
            database_url=database_url,
            user_id=user_id,
            log_format=os.environ.get("GYMLOG_LOG_FORMAT", "json"),
            default_window=os.environ.get("GYMLOG_DEFAULT_WINDOW", "week"),
            weekly_target=_env_int("GYMLOG_WEEKLY_TARGET", 5),
            session_minutes=_env_float("GYMLOG_SESSION_MINUTES", 60.0),
            taxonomy_path=os.environ.get("GYMLOG_TAXONOMY_PATH", "").strip() or None,
        )

    def validate(self) -> "Config":
        """Check settings that only make sense together; returns self."""
        if self.database_url and not self.user_id:
            raise RuntimeError("GYMLOG_USER_ID must be set when DATABASE_URL is used")
        return self
