"""
Build log for a single pipeline run.

A BuildLog is created by the entry point and passed to every stage, so each
run owns its own entries. Messages are forwarded to the standard logging
module for console output and kept in memory until ``save()`` writes them
to ``<log_dir>/<name>.log``.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


@dataclass
class LogEntry:
    """A single leveled log record."""
    timestamp: str
    level: str
    message: str

    def format(self) -> str:
        if self.level == "INFO":
            return f"[{self.timestamp}] {self.message}"
        return f"[{self.timestamp}] {self.level}: {self.message}"


@dataclass
class BuildLog:
    """
    In-memory log context threaded through the pipeline.

    Usage:
        build_log = BuildLog(logger_name="emoji_mapper.map")
        build_log.info("Reading assignments...")
        ...
        build_log.save("emoji-mapping", log_dir)
    """
    logger_name: str = "emoji_mapper"
    entries: List[LogEntry] = field(default_factory=list)

    @property
    def _logger(self) -> logging.Logger:
        return logging.getLogger(self.logger_name)

    def _record(self, level: int, message: str) -> LogEntry:
        entry = LogEntry(
            timestamp=utc_timestamp(),
            level=logging.getLevelName(level),
            message=message,
        )
        self.entries.append(entry)
        self._logger.log(level, message)
        return entry

    def info(self, message: str) -> LogEntry:
        return self._record(logging.INFO, message)

    def warning(self, message: str) -> LogEntry:
        return self._record(logging.WARNING, message)

    def error(self, message: str, error: Optional[BaseException] = None) -> LogEntry:
        if error is not None:
            message = f"{message} - {error}"
        return self._record(logging.ERROR, message)

    @property
    def error_count(self) -> int:
        return sum(1 for e in self.entries if e.level == "ERROR")

    @property
    def warning_count(self) -> int:
        return sum(1 for e in self.entries if e.level == "WARNING")

    def render(self) -> str:
        return "\n".join(entry.format() for entry in self.entries) + "\n"

    def save(self, name: str, log_dir: Union[str, Path]) -> Optional[Path]:
        """
        Flush all entries to ``<log_dir>/<name>.log``.

        Returns the written path, or None if the file could not be written.
        A failed save is reported on the console only; it never fails the run.
        """
        log_path = Path(log_dir) / f"{name}.log"
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(log_path, "w", encoding="utf-8") as f:
                f.write(self.render())
        except OSError as e:
            logger.error(f"Failed to save log file {log_path}: {e}")
            return None

        logger.info(f"Build log saved to: {log_path}")
        return log_path
