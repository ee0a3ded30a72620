"""Display formatting for money values.

Converted values always disclose their origin unless the caller asks for
tooltip-only output, in which case conversion_disclosure() supplies the
tooltip text.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Literal, Optional

from fxfolio.domain.models import ConvertedMoney, Money, RateSource, to_decimal

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "Fr",
    "CNY": "¥",
    "BRL": "R$",
    "KRW": "₩",
    "MXN": "MX$",
    "RUB": "₽",
    "SGD": "S$",
    "HKD": "HK$",
    "NZD": "NZ$",
    "SEK": "kr",
    "NOK": "kr",
    "DKK": "kr",
    "ZAR": "R",
    "AED": "د.إ",
    "SAR": "﷼",
    "THB": "฿",
    "MYR": "RM",
    "PHP": "₱",
    "IDR": "Rp",
    "VND": "₫",
    "PKR": "₨",
    "BDT": "৳",
    "NGN": "₦",
    "EGP": "E£",
    "TRY": "₺",
    "PLN": "zł",
    "CZK": "Kč",
    "HUF": "Ft",
    "ILS": "₪",
    "CLP": "CL$",
    "COP": "CO$",
    "PEN": "S/",
    "ARS": "AR$",
}

DisclosureFormat = Literal["full", "compact", "tooltip-only"]

_SOURCE_LABELS = {
    RateSource.PRIMARY: "ECB reference rate",
    RateSource.FALLBACK: "fallback rate",
}


def currency_symbol(currency: str) -> str:
    """Symbol for a currency code, or the code itself if unknown."""
    return CURRENCY_SYMBOLS.get(currency.upper(), currency)


def format_amount(
    amount,
    min_fraction_digits: int = 2,
    max_fraction_digits: int = 2,
    show_plus_sign: bool = False,
) -> str:
    """Format a number with thousands separators and a leading sign."""
    value = to_decimal(amount)
    return f"{_sign(value, show_plus_sign)}{_digits(abs(value), min_fraction_digits, max_fraction_digits)}"


def format_money(
    value: Money,
    show_plus_sign: bool = False,
    min_fraction_digits: int = 2,
    max_fraction_digits: int = 2,
) -> str:
    """
    Format Money as sign, symbol, digits.

    Example: Money(-50, "USD") -> "-$50.00"
    """
    digits = _digits(abs(value.amount), min_fraction_digits, max_fraction_digits)
    return f"{_sign(value.amount, show_plus_sign)}{currency_symbol(value.currency)}{digits}"


def format_converted_money(
    value: ConvertedMoney,
    disclosure: DisclosureFormat = "full",
    show_plus_sign: bool = False,
    min_fraction_digits: int = 2,
    max_fraction_digits: int = 2,
) -> str:
    """
    Format a converted value with its disclosure.

    full:         "₹4,091.50 (from $49.00 @ 83.50)"
    compact:      amount followed by "*"
    tooltip-only: amount alone
    Values that were not converted never carry a disclosure.
    """
    main = format_money(value.money, show_plus_sign, min_fraction_digits, max_fraction_digits)
    if not value.was_converted or disclosure == "tooltip-only":
        return main
    if disclosure == "compact":
        return f"{main}*"
    original = f"{currency_symbol(value.original_currency)}{_digits(abs(value.original_amount), 2, 2)}"
    return f"{main} (from {original} @ {_fixed(value.exchange_rate, 2)})"


def conversion_disclosure(value: ConvertedMoney) -> Optional[str]:
    """Tooltip/footnote text describing a conversion, or None."""
    if not value.was_converted:
        return None
    return (
        f"Converted from {value.original_currency} {_fixed(value.original_amount, 2)} "
        f"@ {_fixed(value.exchange_rate, 4)} {value.original_currency}→{value.currency} "
        f"({_SOURCE_LABELS[value.rate_source]}, {value.rate_date})"
    )


def conversion_short_info(value: ConvertedMoney) -> Optional[str]:
    if not value.was_converted:
        return None
    return f"{value.original_currency} @ {_fixed(value.exchange_rate, 2)}"


def format_percent(value, show_plus_sign: bool = False, fraction_digits: int = 2) -> str:
    """Format a percentage, e.g. 12.345 -> "12.35%"."""
    return f"{format_amount(value, fraction_digits, fraction_digits, show_plus_sign)}%"


def _sign(value: Decimal, show_plus_sign: bool) -> str:
    if value < 0:
        return "-"
    return "+" if show_plus_sign and value > 0 else ""


def _fixed(value: Decimal, places: int) -> str:
    quantum = Decimal(1).scaleb(-places)
    return str(value.quantize(quantum, rounding=ROUND_HALF_UP))


def _digits(value: Decimal, min_places: int, max_places: int) -> str:
    """Group thousands, round half up to max_places, trim zeros down to min_places."""
    rounded = value.quantize(Decimal(1).scaleb(-max_places), rounding=ROUND_HALF_UP)
    text = f"{rounded:,.{max_places}f}"
    if max_places > min_places:
        whole, _, fraction = text.partition(".")
        fraction = fraction.rstrip("0").ljust(min_places, "0")
        text = f"{whole}.{fraction}" if fraction else whole
    return text
