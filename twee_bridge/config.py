"""Configuration from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from twee_bridge.models import DEFAULT_SIZE, Vector

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class Settings:
    root: Path = Path('.')
    host: str = '127.0.0.1'
    port: int = 5000
    log_level: str = 'INFO'
    default_size: Vector = field(default=DEFAULT_SIZE)

    @classmethod
    def from_env(cls) -> 'Settings':
        """Read settings from TWEE_BRIDGE_* variables.

        Raises:
            ValueError: A variable holds a value that cannot be parsed
        """
        log_level = os.getenv("TWEE_BRIDGE_LOG_LEVEL", "INFO").upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"TWEE_BRIDGE_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level}")
        return cls(
            root=Path(os.getenv("TWEE_BRIDGE_ROOT", ".")),
            host=os.getenv("TWEE_BRIDGE_HOST", "127.0.0.1"),
            port=int(os.getenv("TWEE_BRIDGE_PORT", "5000")),
            log_level=log_level,
            default_size=Vector.parse(os.getenv("TWEE_BRIDGE_DEFAULT_SIZE", "100,100")),
        )
