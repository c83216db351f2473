"""Calendar directory loading - calview_lite.

A calendar is a directory whose direct child files each hold one or more
event records. Unreadable directories and files are reported and skipped so
that a single bad file never aborts the load.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from .lite_entry_builder import LiteEntryBuilder
from .lite_exceptions import LiteCalendarIOError
from .lite_models import LoadedCalendar
from .lite_record_parser import LiteRecordParser

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024  # 50MB limit


def list_calendar_files(directory: Path) -> list[Path]:
    """List regular files directly inside ``directory``, sorted by name.

    Raises:
        LiteCalendarIOError: If the directory is missing or cannot be listed
    """
    if not directory.is_dir():
        raise LiteCalendarIOError(f"Directory does not exist: {directory}")

    try:
        children = sorted(directory.iterdir(), key=lambda child: child.name)
    except OSError as e:
        raise LiteCalendarIOError(f"Could not list directory {directory}: {e}") from e

    return [child for child in children if child.is_file()]


def read_calendar_file(path: Path, max_size_bytes: int = MAX_FILE_SIZE_BYTES) -> str:
    """Read one event file as text.

    Raises:
        LiteCalendarIOError: If the file cannot be read or is too large
    """
    try:
        size_bytes = path.stat().st_size
        if size_bytes > max_size_bytes:
            raise LiteCalendarIOError(
                f"Calendar file too large: {path} is {size_bytes} bytes "
                f"(limit {max_size_bytes})"
            )
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise LiteCalendarIOError(f"Could not read file: {path} ({e})") from e


class LiteCalendarLoader:
    """Loads every event entry of one calendar directory."""

    def __init__(self, settings: Any = None) -> None:
        """Initialize loader.

        Args:
            settings: Optional configuration object with ``max_file_size_bytes``
        """
        self.max_file_size_bytes = getattr(settings, "max_file_size_bytes", MAX_FILE_SIZE_BYTES)
        self._record_parser = LiteRecordParser()
        self._entry_builder = LiteEntryBuilder()

    def load(self, directory: str) -> LoadedCalendar:
        """Load a calendar directory.

        Args:
            directory: Path of the calendar directory

        Returns:
            LoadedCalendar named after the directory. ``available`` is False
            when the directory itself could not be listed.
        """
        path = Path(directory).expanduser()
        name = path.resolve().name or str(path)
        calendar = LoadedCalendar(name=name, directory=str(path))

        try:
            files = list_calendar_files(path)
        except LiteCalendarIOError as e:
            logger.error("%s", e)
            calendar.add_error(str(e))
            calendar.available = False
            return calendar

        for file_path in files:
            try:
                content = read_calendar_file(file_path, self.max_file_size_bytes)
            except LiteCalendarIOError as e:
                logger.warning("%s", e)
                calendar.add_error(str(e))
                continue

            calendar.file_count += 1
            records = self._record_parser.parse(content, str(file_path))
            for record in records:
                entry = self._entry_builder.build(record)
                if entry is None:
                    calendar.discarded_count += 1
                    calendar.add_error(f"No start date for: {record.source_path}")
                    continue
                calendar.entries.append(entry)

        logger.info(
            "Loaded calendar %r: %d entries from %d files (%d discarded, %d errors)",
            calendar.name,
            len(calendar.entries),
            calendar.file_count,
            calendar.discarded_count,
            len(calendar.errors),
        )
        return calendar


def load_calendar(directory: str, settings: Optional[Any] = None) -> LoadedCalendar:
    """Query surface for the presentation layer: load one calendar directory."""
    return LiteCalendarLoader(settings).load(directory)
