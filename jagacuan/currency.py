def format_rupiah(value) -> str:
    """Format an amount as Indonesian rupiah without decimals, e.g. Rp 1.250.000"""
    try:
        amount = float(value)
    except (ValueError, TypeError):
        amount = 0.0
    sign = "-" if amount < 0 else ""
    digits = "{:,.0f}".format(abs(amount)).replace(",", ".")
    return f"{sign}Rp {digits}"


def format_rupiah_short(value) -> str:
    """Compact rupiah for chart axes: Rp 1.5B, Rp 2.3M, Rp 12.0K"""
    try:
        amount = float(value)
    except (ValueError, TypeError):
        amount = 0.0
    if amount >= 1_000_000_000:
        return f"Rp {amount / 1_000_000_000:.1f}B"
    if amount >= 1_000_000:
        return f"Rp {amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"Rp {amount / 1_000:.1f}K"
    return format_rupiah(amount)
