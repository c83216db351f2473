"""RRULE expansion logic for calview_lite.

Supports the FREQ/INTERVAL/COUNT/UNTIL subset of the recurrence grammar.
Occurrences are generated by stepping local calendar fields with
``advance()``, substituting RECURRENCE-ID exceptions by exact instant.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .lite_datetime_utils import SUPPORTED_FREQUENCIES, advance, parse_temporal
from .lite_exceptions import LiteDateParseError, LiteDateRangeError
from .lite_models import CalendarEntry

logger = logging.getLogger(__name__)

# Hard safety cap on accepted occurrences per rule; configuration may lower it.
MAX_OCCURRENCES_PER_RULE = 1000


@dataclass
class RRuleSpec:
    """Parsed subset of an RRULE value."""

    freq: Optional[str] = None
    interval: int = 1
    until: Optional[int] = None
    count: Optional[int] = None


@dataclass
class RRuleExpanderConfig:
    """Configuration for RRULE expansion."""

    max_occurrences_per_rule: int = MAX_OCCURRENCES_PER_RULE

    @classmethod
    def from_settings(cls, settings: Any) -> "RRuleExpanderConfig":
        """Extract RRULE configuration from a settings object.

        Args:
            settings: Object with an optional ``max_occurrences_per_rule``
                attribute (None uses defaults)

        Returns:
            RRuleExpanderConfig with the cap clamped to 1..MAX_OCCURRENCES_PER_RULE
        """
        cap = getattr(settings, "max_occurrences_per_rule", MAX_OCCURRENCES_PER_RULE)
        try:
            cap = int(cap)
        except (TypeError, ValueError):
            cap = MAX_OCCURRENCES_PER_RULE
        return cls(max_occurrences_per_rule=max(1, min(cap, MAX_OCCURRENCES_PER_RULE)))


class LiteRRuleExpander:
    """Expands recurring CalendarEntry objects over a query window."""

    def __init__(self, settings: Any = None):
        """Initialize expander.

        Args:
            settings: Optional configuration object with expansion settings
        """
        config = RRuleExpanderConfig.from_settings(settings)
        self.max_occurrences = config.max_occurrences_per_rule

    def parse_rrule_string(self, rrule_string: str) -> RRuleSpec:
        """Parse an RRULE value into its components.

        Tokens are ``;``-separated ``KEY=VALUE`` pairs; keys are matched
        case-insensitively and unknown keys are ignored. Values that cannot
        be parsed are dropped with a warning so the rule degrades instead of
        failing.

        Args:
            rrule_string: RRULE value, e.g. "FREQ=WEEKLY;INTERVAL=2;COUNT=10"

        Returns:
            RRuleSpec (freq may be None or an unsupported name)
        """
        spec = RRuleSpec()

        for part in rrule_string.split(";"):
            if "=" not in part:
                continue
            key, value = part.split("=", 1)
            key = key.strip().upper()
            value = value.strip()

            if key == "FREQ":
                spec.freq = value.upper() or None
            elif key == "INTERVAL":
                try:
                    spec.interval = int(value)
                except ValueError:
                    logger.warning("Ignoring invalid RRULE INTERVAL %r", value)
                    continue
                if spec.interval < 1:
                    logger.warning("RRULE INTERVAL %d is not positive; using 1", spec.interval)
                    spec.interval = 1
            elif key == "COUNT":
                try:
                    spec.count = int(value)
                except ValueError:
                    logger.warning("Ignoring invalid RRULE COUNT %r", value)
            elif key == "UNTIL":
                try:
                    spec.until = parse_temporal(value).instant
                except LiteDateParseError as e:
                    logger.warning(f"Ignoring RRULE UNTIL: {e}")

        if spec.freq is not None and spec.freq not in SUPPORTED_FREQUENCIES:
            logger.debug("Unsupported RRULE FREQ %r", spec.freq)

        return spec

    def expand_event(
        self,
        entry: CalendarEntry,
        exceptions: list[CalendarEntry],
        window_start: int,
        window_end: int,
        max_occurrences: Optional[int] = None,
    ) -> list[CalendarEntry]:
        """Expand one entry into concrete occurrences.

        Args:
            entry: Base entry (exceptions are returned unexpanded)
            exceptions: Candidate RECURRENCE-ID overrides
            window_start: Inclusive window start instant
            window_end: Inclusive window end instant
            max_occurrences: Optional lower cap for this call

        Returns:
            ``[entry]`` when there is no rule; otherwise the accepted
            occurrences in generation order, each an independent value
        """
        if not entry.rrule or entry.is_exception:
            return [entry]

        spec = self.parse_rrule_string(entry.rrule)
        cap = self.max_occurrences
        if max_occurrences is not None:
            cap = max(0, min(cap, max_occurrences))

        overrides = self._index_exceptions(exceptions)
        duration = entry.duration_seconds

        occurrences: list[CalendarEntry] = []
        current = entry.start.instant
        generated = 0

        while len(occurrences) < cap:
            if spec.until is not None and current > spec.until:
                break
            if spec.count is not None and generated >= spec.count:
                break
            if current > window_end:
                break

            generated += 1
            if current >= window_start or current + duration > window_start:
                override = overrides.get(current)
                if override is not None:
                    occurrences.append(override.model_copy())
                else:
                    occurrences.append(entry.rebind(current))

            try:
                following = advance(current, spec.interval, spec.freq)
            except LiteDateRangeError as e:
                logger.warning(
                    "RRULE %r for %s leaves the supported date range; stopping: %s",
                    entry.rrule,
                    entry.source_path,
                    e,
                )
                break
            if following <= current:
                logger.warning(
                    "RRULE %r for %s does not advance (FREQ=%s); stopping after %d occurrence(s)",
                    entry.rrule,
                    entry.source_path,
                    spec.freq,
                    len(occurrences),
                )
                break
            current = following

        if len(occurrences) >= cap:
            logger.debug(
                "RRULE expansion for %s limited to %d occurrences", entry.source_path, cap
            )

        return occurrences

    def _index_exceptions(self, exceptions: list[CalendarEntry]) -> dict[int, CalendarEntry]:
        """Map override instant to the first exception carrying it."""
        index: dict[int, CalendarEntry] = {}
        for exception in exceptions:
            if exception.recurrence_id is not None:
                index.setdefault(exception.recurrence_id.instant, exception)
        return index


def expand_entry(
    entry: CalendarEntry,
    exceptions: list[CalendarEntry],
    window_start: int,
    window_end: int,
    max_occurrences: int = MAX_OCCURRENCES_PER_RULE,
) -> list[CalendarEntry]:
    """Expand one entry with the default expander settings."""
    return LiteRRuleExpander().expand_event(
        entry, exceptions, window_start, window_end, max_occurrences
    )
