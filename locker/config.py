"""Configuration settings for the local file locker."""

import os
from pathlib import Path


DATA_DIR = os.environ.get("LOCKER_DATA_DIR", str(Path.home() / ".locker"))

DATABASE_PATH = os.environ.get("LOCKER_DATABASE_PATH", str(Path(DATA_DIR) / "files.db"))

STATE_PATH = os.environ.get("LOCKER_STATE_PATH", str(Path(DATA_DIR) / "state.json"))

LIST_BATCH_SIZE = int(os.environ.get("LOCKER_LIST_BATCH_SIZE", "64"))
