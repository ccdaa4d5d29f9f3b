from nutritrack.core.config import settings
from nutritrack.core.base import Base
from nutritrack.core.db import Database, get_db

__all__ = ["settings", "Base", "Database", "get_db"]
