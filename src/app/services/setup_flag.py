"""
Setup completion flag.

A file under DATA_DIR, outside the database so that it survives database
resets. It is created exclusively and made read-only; nothing in this
service removes it.
"""

import json
import logging
import os
from datetime import datetime
from typing import Optional

from config import ApplicationConfig

logger = logging.getLogger(__name__)

SETUP_FLAG_FILENAME = ".setup-complete"
SETUP_FLAG_VERSION = "1.0"


class SetupFlagWriteError(Exception):
    """The completion flag could not be persisted"""


class SetupFlag:
    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = data_dir or ApplicationConfig.DATA_DIR
        self.path = os.path.join(self.data_dir, SETUP_FLAG_FILENAME)

    def is_set(self) -> bool:
        return os.path.exists(self.path)

    def mark_complete(self) -> dict:
        """
        Persist the flag.

        Raises SetupFlagWriteError when the directory cannot be created, the
        flag already exists, or the write fails.
        """
        completion = {
            "completed": True,
            "timestamp": datetime.utcnow().isoformat(),
            "version": SETUP_FLAG_VERSION,
        }

        try:
            os.makedirs(self.data_dir, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
            with os.fdopen(fd, "w", encoding="utf-8") as w_file:
                json.dump(completion, w_file, indent=2)
            # r--r--r--
            os.chmod(self.path, 0o444)
        except OSError as exc:
            logger.critical(f"Failed to persist setup completion flag at {self.path}: {exc}")
            raise SetupFlagWriteError(str(exc)) from exc

        logger.info(f"Setup marked as complete at {completion['timestamp']}")
        return completion

    def details(self) -> Optional[dict]:
        if not self.is_set():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as r_file:
                return json.load(r_file)
        except (OSError, ValueError) as exc:
            logger.error(f"Error reading setup flag: {exc}")
            return None
