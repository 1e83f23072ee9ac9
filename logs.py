# logs.py
import logging
from collections import deque
from datetime import datetime
from typing import Any, Dict, List, Optional

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOGS = 1000


def configure_logging(level: str = "INFO") -> None:
  logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT)
  # basicConfig is a no-op once the root logger has handlers
  logging.getLogger().setLevel(level)


class LogBuffer(logging.Handler):
  """Keeps the most recent log records in memory, newest first."""

  def __init__(self, capacity: int = MAX_LOGS, level=logging.INFO):
    super().__init__(level=level)
    self._entries: deque = deque(maxlen=capacity)

  def emit(self, record: logging.LogRecord) -> None:
    entry: Dict[str, Any] = {
      "timestamp": datetime.fromtimestamp(record.created).strftime(DATE_FORMAT),
      "level": record.levelname.lower(),
      "logger": record.name,
      "message": record.getMessage(),
    }
    details = getattr(record, "details", None)
    if details is not None:
      entry["details"] = details
    self._entries.appendleft(entry)

  def entries(self, limit: int = 100, level: Optional[str] = None) -> List[Dict[str, Any]]:
    rows = [e for e in self._entries if level is None or e["level"] == level]
    return rows[:limit]

  def recent_errors(self, limit: int = 10) -> List[Dict[str, Any]]:
    return self.entries(limit, level="error")

  def clear(self) -> None:
    self._entries.clear()
