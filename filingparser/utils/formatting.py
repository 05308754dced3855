"""Human-readable money formatting for log lines and warnings."""


def format_money(value: float) -> str:
    """
    Format an absolute currency amount with a T/B/M/K suffix.

    Examples:
        125843000000 -> "$125.84B"
        -1500000 -> "-$1.50M"
    """
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude >= 1e12:
        return f"{sign}${magnitude / 1e12:.2f}T"
    if magnitude >= 1e9:
        return f"{sign}${magnitude / 1e9:.2f}B"
    if magnitude >= 1e6:
        return f"{sign}${magnitude / 1e6:.2f}M"
    if magnitude >= 1e3:
        return f"{sign}${magnitude / 1e3:.2f}K"
    return f"{sign}${magnitude:.2f}"
