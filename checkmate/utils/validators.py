from typing import Any

def coerce_int(value: Any, default: int, minimum: int, maximum: int) -> int:
    """int() the value and clamp it; falsy or malformed values give the default"""
    if not value:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return max(minimum, min(maximum, number))

def coerce_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    return bool(value)

def coerce_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)

def coerce_amount(value: Any) -> float:
    """Fine amounts: numbers >= 0, anything unreadable counts as 0"""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if amount != amount or amount < 0:
        return 0.0
    return amount

def is_valid_password(password: str, min_length: int = 4) -> bool:
    return isinstance(password, str) and len(password.strip()) >= min_length
