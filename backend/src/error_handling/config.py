"""
Configuration for the error handling system.
"""
import logging
import os
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

ENV_PREFIX = "ERROR_HANDLER_"


@dataclass
class ErrorHandlerConfig:
    """Configuration for recovery, retry and health monitoring."""
    default_retry_after: float = 1.0
    max_retry_after: float = 60.0
    default_max_retries: int = 3
    health_check_url: str = "http://localhost:8000/health"
    health_check_interval: float = 30.0
    health_check_timeout: float = 5.0
    statistics_database_url: str | None = None

    @classmethod
    def from_env(cls) -> 'ErrorHandlerConfig':
        """Create config from ``ERROR_HANDLER_*`` environment variables.

        Unset variables keep their defaults. Values that fail to parse are
        logged and ignored.
        """
        config = cls()
        for f in fields(cls):
            raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None:
                continue

            current = getattr(config, f.name)
            try:
                if isinstance(current, bool):
                    value = raw.strip().lower() in ("1", "true", "yes", "on")
                elif isinstance(current, int):
                    value = int(raw)
                elif isinstance(current, float):
                    value = float(raw)
                else:
                    value = raw
            except ValueError:
                logger.warning(f"Ignoring invalid value {raw!r} for {ENV_PREFIX}{f.name.upper()}")
                continue

            setattr(config, f.name, value)

        return config
