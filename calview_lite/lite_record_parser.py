"""Line-based VEVENT record extraction - calview_lite.

Splits raw calendar text into RawRecord objects. Field semantics are left to
the entry builder; this layer only tokenises ``KEY[;params]:VALUE`` lines.
"""

import logging
import re
from typing import Optional

from .lite_models import RawRecord

logger = logging.getLogger(__name__)

BEGIN_MARKER = "BEGIN:VEVENT"
END_MARKER = "END:VEVENT"

# key up to the first ';' or ':', parameters dropped, value after the next ':'
_PROPERTY_LINE = re.compile(r"^([^;:]+)[^:]*:(.*)$")


class LiteRecordParser:
    """Parser for BEGIN:VEVENT ... END:VEVENT blocks in plain calendar text."""

    def parse(self, content: str, source_path: str) -> list[RawRecord]:
        """Extract every complete event record from ``content``.

        Args:
            content: Full text of one calendar file
            source_path: Path of the file the text came from

        Returns:
            Records in file order. Lines outside a record are ignored, an
            END marker without an open record is a no-op and a record still
            open at end of input is dropped.
        """
        records: list[RawRecord] = []
        current: Optional[dict[str, str]] = None
        skipped_lines = 0

        for line in content.splitlines():
            if not line:
                continue
            if line.startswith(BEGIN_MARKER):
                current = {}
            elif line.startswith(END_MARKER):
                if current is not None:
                    records.append(RawRecord(fields=current, source_path=source_path))
                current = None
            elif current is not None:
                parsed = self._split_property_line(line)
                if parsed is None:
                    skipped_lines += 1
                    continue
                key, value = parsed
                current[key] = value

        if current is not None:
            logger.debug("Unterminated event record dropped in %s", source_path)

        logger.debug(
            "Parsed %d records from %s (%d malformed lines skipped)",
            len(records),
            source_path,
            skipped_lines,
        )
        return records

    def _split_property_line(self, line: str) -> Optional[tuple[str, str]]:
        """Split ``KEY[;params]:VALUE`` into (KEY, VALUE), or None if malformed."""
        match = _PROPERTY_LINE.match(line)
        if not match:
            return None
        return match.group(1), match.group(2)


def parse_records(content: str, source_path: str) -> list[RawRecord]:
    """Extract event records from one file's text."""
    return LiteRecordParser().parse(content, source_path)
