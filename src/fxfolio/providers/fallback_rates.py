"""Static fallback exchange rates.

Approximate rates used only when the live rate source is unreachable.
"""

from decimal import Decimal
from typing import Optional

FALLBACK_RATES: dict[str, dict[str, Decimal]] = {
    "USD": {
        "INR": Decimal("83.50"),
        "EUR": Decimal("0.92"),
        "GBP": Decimal("0.79"),
        "JPY": Decimal("154.50"),
        "CAD": Decimal("1.36"),
        "AUD": Decimal("1.53"),
        "CHF": Decimal("0.88"),
        "CNY": Decimal("7.24"),
        "SGD": Decimal("1.34"),
        "HKD": Decimal("7.80"),
    },
    "EUR": {
        "USD": Decimal("1.09"),
        "INR": Decimal("91.00"),
        "GBP": Decimal("0.86"),
        "JPY": Decimal("168.00"),
        "CHF": Decimal("0.96"),
    },
    "GBP": {
        "USD": Decimal("1.27"),
        "EUR": Decimal("1.17"),
        "INR": Decimal("106.00"),
    },
    "INR": {
        "USD": Decimal("0.012"),
        "EUR": Decimal("0.011"),
        "GBP": Decimal("0.0094"),
    },
}


def _to_usd(currency: str, table: dict[str, dict[str, Decimal]]) -> Optional[Decimal]:
    direct = table.get(currency, {}).get("USD")
    if direct:
        return direct
    inverse = table.get("USD", {}).get(currency)
    if inverse:
        return Decimal("1") / inverse
    return None


def _from_usd(currency: str, table: dict[str, dict[str, Decimal]]) -> Optional[Decimal]:
    direct = table.get("USD", {}).get(currency)
    if direct:
        return direct
    inverse = table.get(currency, {}).get("USD")
    if inverse:
        return Decimal("1") / inverse
    return None


def get_fallback_rate(
    base: str,
    target: str,
    table: Optional[dict[str, dict[str, Decimal]]] = None,
) -> Optional[Decimal]:
    """
    Look up an approximate rate from base to target.

    Tries a direct entry, then the inverse entry, then a cross rate through
    USD. Returns None when none of these exist.
    """
    table = FALLBACK_RATES if table is None else table
    base = base.upper()
    target = target.upper()

    direct = table.get(base, {}).get(target)
    if direct:
        return direct

    inverse = table.get(target, {}).get(base)
    if inverse:
        return Decimal("1") / inverse

    if base != "USD" and target != "USD":
        base_to_usd = _to_usd(base, table)
        usd_to_target = _from_usd(target, table)
        if base_to_usd and usd_to_target:
            return base_to_usd * usd_to_target

    return None
