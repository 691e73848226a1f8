"""Teklif ve fatura toplam hesapları."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, Optional

from fleetops.models.records import DiscountType, QuoteLineItem, QuoteTerms

DEFAULT_TAX_RATE = 0.08


@dataclass
class QuoteTotals:
    subtotal: float
    discount_amount: float
    additional_fees: float
    tax_amount: float
    total_amount: float

    def to_dict(self) -> dict:
        return asdict(self)


def line_total(quantity: int, unit_price: float) -> float:
    return unit_price * quantity


def discount_amount(subtotal: float, terms: QuoteTerms) -> float:
    """Yüzde indirimde ara toplamın yüzdesi, sabit indirimde değerin kendisi."""
    if DiscountType(terms.discount_type) == DiscountType.PERCENTAGE:
        return subtotal * terms.discount_value / 100
    return terms.discount_value


def quote_totals(
    lines: Iterable[QuoteLineItem],
    terms: Optional[QuoteTerms] = None,
    tax_rate: float = DEFAULT_TAX_RATE,
) -> QuoteTotals:
    """Vergi, indirimli ara toplam ve ek ücretler üzerinden hesaplanır."""
    terms = terms or QuoteTerms()
    subtotal = sum(line.line_total for line in lines)
    discount = discount_amount(subtotal, terms)
    taxable = subtotal - discount + terms.additional_fees
    tax = taxable * tax_rate

    return QuoteTotals(
        subtotal=subtotal,
        discount_amount=discount,
        additional_fees=terms.additional_fees,
        tax_amount=tax,
        total_amount=taxable + tax,
    )
