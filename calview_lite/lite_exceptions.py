"""Exception hierarchy for calview_lite.

Loading and projection never abort on a single bad file or entry; these
exceptions mark the failure points that callers catch, report and skip.
"""


class CalviewLiteError(Exception):
    """Base exception for all calview_lite errors."""


class LiteCalendarIOError(CalviewLiteError):
    """A calendar directory or event file could not be read.

    Raised when:
    - The calendar directory is missing or is not a directory
    - The directory listing fails
    - An event file is unreadable or exceeds the configured size limit

    Reported and skipped by the loader; never fatal to the whole load.
    """


class LiteDateParseError(CalviewLiteError, ValueError):
    """A date or date-time string does not have a supported shape.

    Fatal for the owning entry only when raised for DTSTART; optional
    fields simply become absent.
    """


class LiteDateRangeError(CalviewLiteError, ValueError):
    """A calendar computation left the range the host can represent.

    Raised when stepping or converting an instant lands outside years
    1..9999. Expansion and day walks stop at that point instead of failing.
    """
