# app/domain/totals.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

CENT = Decimal("0.01")


def _dec(value) -> Decimal:
    # float przez str, zeby nie ciagnac bledu binarnej reprezentacji
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_money(value) -> Decimal:
    """Zaokraglenie half-up do 2 miejsc (nie bankierskie)."""
    return _dec(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CartTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    item_count: int


def line_subtotal(price_snapshot, quantity: int) -> Decimal:
    return round_money(_dec(price_snapshot) * quantity)


def calculate_totals(lines: Iterable[Tuple[Decimal, int]], tax_rate) -> CartTotals:
    """
    Liczy subtotal, podatek i sume dla linii (price_snapshot, quantity).

    Subtotal sumowany bez zaokraglania linii, zaokraglany raz na koncu.
    Stawka podatku nie jest zaokraglana.
    """
    raw_subtotal = Decimal("0")
    item_count = 0
    for price, quantity in lines:
        raw_subtotal += _dec(price) * quantity
        item_count += quantity

    subtotal = round_money(raw_subtotal)
    tax = round_money(subtotal * _dec(tax_rate))
    total = round_money(subtotal + tax)

    return CartTotals(subtotal=subtotal, tax=tax, total=total, item_count=item_count)
