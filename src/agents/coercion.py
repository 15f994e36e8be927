# src/agents/coercion.py
# Field coercion for model-generated module objects.

import math
from typing import Any, Dict


def first_present(data: Dict[str, Any], *keys: str) -> Any:
    """Returns the first truthy value among ``keys`` (camelCase, snake_case and legacy names)."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


def as_int(value: Any, default: int) -> int:
    """``int(value)``, or ``default`` for anything non-numeric, NaN or infinite."""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def as_text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


def as_boosts(value: Any, default: Dict[str, float]) -> Dict[str, float]:
    """Keeps the finite numeric entries of a competency-boost object."""
    if not isinstance(value, dict):
        return dict(default)
    boosts = {}
    for name, boost in value.items():
        if isinstance(boost, bool) or not isinstance(boost, (int, float)):
            continue
        try:
            boost = float(boost)
        except OverflowError:
            continue
        if math.isfinite(boost):
            boosts[str(name)] = boost
    return boosts
