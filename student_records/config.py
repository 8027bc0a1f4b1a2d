"""Runtime configuration shared by the GUI, the CLI and the manager."""

import logging
from dataclasses import dataclass

__all__ = ["AppConfig", "DEFAULT_DB_PATH"]

DEFAULT_DB_PATH = "~/.student-records/students.db"


@dataclass
class AppConfig:
    """Runtime configuration for the student-records application."""
    db_path:                 str   = DEFAULT_DB_PATH
    busy_timeout:            float = 5.0     # seconds SQLite waits on a locked file
    notification_timeout_ms: int   = 4000    # auto-dismiss delay for notifications
    seed_on_first_run:       bool  = True    # insert sample students into an empty store
    debug:                   bool  = False   # verbose logging

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self.debug else logging.INFO
