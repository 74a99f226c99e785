"""
Fixed-point helpers for reward-token amounts.

Whole-token literals such as ``"1000000"`` are scaled to the token's integer
representation before they go on-chain, and balances read back are scaled down
for display. ERC20Mock uses 18 decimals, the same scale as ether.
"""

from __future__ import annotations

import decimal
from decimal import Decimal
from typing import Union

from eth_utils import from_wei, to_wei

TOKEN_DECIMALS = 18
MAX_UINT256 = 2**256 - 1

Amount = Union[int, str, Decimal]


def _to_decimal(value: Amount, decimals: int) -> Decimal:
    if isinstance(value, float):
        raise TypeError("Use str or Decimal for token amounts, not float")
    try:
        amount = Decimal(str(value).strip())
    except decimal.InvalidOperation as exc:
        raise ValueError(f"Invalid token amount: {value!r}") from exc
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Token amount must be a non-negative number: {value!r}")
    with decimal.localcontext() as ctx:
        ctx.prec = 999
        places = max(0, -amount.normalize().as_tuple().exponent)
    if places > decimals:
        raise ValueError(f"Too many decimal places for a {decimals}-decimal token: {value!r}")
    return amount


def _format(amount: Decimal) -> str:
    text = format(amount, "f")
    if "." not in text:
        return f"{text}.0"
    whole, fraction = text.split(".", 1)
    return f"{whole}.{fraction.rstrip('0') or '0'}"


def parse_units(value: Amount, decimals: int = TOKEN_DECIMALS) -> int:
    """Scale a whole-unit amount to its integer representation.

    Raises ValueError for negative, non-numeric or over-precise amounts.
    """
    amount = _to_decimal(value, decimals)
    with decimal.localcontext() as ctx:
        ctx.prec = 999
        result = int(amount.scaleb(decimals))
    if result > MAX_UINT256:
        raise ValueError(f"Token amount exceeds uint256: {value!r}")
    return result


def format_units(value: int, decimals: int = TOKEN_DECIMALS) -> str:
    """Scale an integer amount down to whole units.

    Output always carries a fractional part with trailing zeros trimmed,
    e.g. ``100000 * 10**18 -> "100000.0"``.
    """
    with decimal.localcontext() as ctx:
        ctx.prec = 999
        return _format(Decimal(int(value)).scaleb(-decimals))


def parse_ether(value: Amount) -> int:
    """18-decimal scaling of a whole-token literal (``parseEther``)."""
    return int(to_wei(_to_decimal(value, TOKEN_DECIMALS), "ether"))


def format_ether(value: int) -> str:
    """Display form of an 18-decimal integer amount (``formatEther``)."""
    return _format(Decimal(from_wei(int(value), "ether")))
