"""Shared utility functions for the College Data Quality toolkit.

Contains the canonical implementations of small formatting helpers used
across validator messages and reports. All callsites should import from
here rather than maintaining local copies.
"""


def format_number(value: float | int) -> str:
    """Render a number the way the college site displays it.

    Integral values drop the decimal point ("150" rather than "150.0");
    everything else keeps its shortest round-trip representation.

    Args:
        value: Numeric value.

    Returns:
        String form suitable for embedding in issue messages.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_percent(part: int, whole: int) -> str:
    """Format ``part / whole`` as a one-decimal percentage ("42.5%").

    Returns "0.0%" when ``whole`` is zero.
    """
    if whole == 0:
        return "0.0%"
    return f"{part / whole * 100:.1f}%"


def is_blank(value: object) -> bool:
    """Return True for None and the empty string.

    False, 0, and empty containers are real values for presence checks.
    """
    return value is None or value == ""
