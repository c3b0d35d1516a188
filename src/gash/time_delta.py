"""Human readable formatting of timestamp shifts."""


def format_time_delta(seconds: int) -> str:
    """Format a shift in seconds as ``+MM:SS`` / ``-MM:SS``.

    Minutes are right-aligned to two columns so consecutive lines line up,
    e.g. ``+ 0:10``, ``+22:17``, ``-60:00``.
    """
    minutes, remainder = divmod(abs(seconds), 60)
    direction = "-" if seconds < 0 else "+"
    return f"{direction}{minutes:2}:{remainder:02}"
