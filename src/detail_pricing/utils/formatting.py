"""
Display helpers: currency, decimal-comma input and HH:MM durations.

The engine works with plain floats; these live at the edges (UI, API, exports).
"""
import math


def format_currency(value: float, symbol: str = 'R$') -> str:
    """Format money the Brazilian way: R$ 1.234,56."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        value = 0.0
    sign = '-' if value < 0 else ''
    text = f"{abs(value):,.2f}"
    # 1,234.56 -> 1.234,56
    text = text.replace(',', '_').replace('.', ',').replace('_', '.')
    return f"{sign}{symbol} {text}"


def parse_decimal_input(text) -> float:
    """
    Parse a typed amount that may use a decimal comma.

    "12,50" -> 12.5, "1.234,56" -> 1234.56, "" or junk -> 0.0
    """
    if text is None:
        return 0.0
    if isinstance(text, (int, float)):
        return float(text)

    cleaned = str(text).strip().replace('R$', '').replace(' ', '')
    if not cleaned:
        return 0.0
    if ',' in cleaned:
        cleaned = cleaned.replace('.', '').replace(',', '.')
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) else 0.0


def format_minutes_hhmm(total_minutes) -> str:
    if total_minutes is None or total_minutes < 0 or math.isnan(total_minutes):
        return "00:00"
    total = int(total_minutes)
    hours, minutes = divmod(total, 60)
    return f"{hours:02d}:{minutes:02d}"


def parse_hhmm_to_minutes(hhmm: str) -> int:
    """'02:30' -> 150. Anything malformed is 0."""
    if not hhmm:
        return 0
    parts = str(hhmm).strip().split(':')
    if len(parts) != 2:
        return 0
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return 0
    if hours < 0 or minutes < 0 or minutes >= 60:
        return 0
    return hours * 60 + minutes
