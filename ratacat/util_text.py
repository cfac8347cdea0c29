"""Compact human-readable formatting of gas and token amounts."""

from __future__ import annotations

_TERA = 1_000_000_000_000
_GIGA = 1_000_000_000
_MEGA = 1_000_000
_ONE_NEAR = 10**24


def format_gas_compact(gas: int) -> str:
    """Format gas with a one-letter unit suffix, e.g. ``30T``."""
    if gas < 0:
        raise ValueError("gas cannot be negative")
    if gas == 0:
        return "0"
    for unit, suffix in ((_TERA, "T"), (_GIGA, "G"), (_MEGA, "M")):
        if gas >= unit:
            return f"{gas // unit}{suffix}"
    return str(gas)


def format_near_compact(yoctonear: int) -> str:
    """Format a yoctoNEAR amount as NEAR with one truncated decimal, e.g. ``1.5Ⓝ``."""
    if yoctonear < 0:
        raise ValueError("amount cannot be negative")
    if yoctonear == 0:
        return "0Ⓝ"
    if yoctonear < _ONE_NEAR:
        return f"{yoctonear}y"
    whole, remainder = divmod(yoctonear, _ONE_NEAR)
    if remainder == 0:
        return f"{whole}Ⓝ"
    return f"{whole}.{remainder * 10 // _ONE_NEAR}Ⓝ"