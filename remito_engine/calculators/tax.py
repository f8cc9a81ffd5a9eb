from __future__ import annotations

from decimal import Decimal

from ..models import TaxSplit
from ..utils import to_decimal


def _factor(rate_percent) -> Decimal:
    return Decimal(1) + to_decimal(rate_percent) / Decimal(100)


def decompose(gross, rate_percent) -> TaxSplit:
    """Split a tax-inclusive amount into the net value and the tax it contains.

    net = gross / (1 + rate/100), tax = gross - net. A rate of 0 returns the
    gross amount as net. Negative rates are not checked: the result is
    arithmetically defined but meaningless, and callers must reject them.
    """
    gross = to_decimal(gross)
    net = gross / _factor(rate_percent)
    return TaxSplit(net=net, tax=gross - net)


def compose(net, rate_percent) -> Decimal:
    """Inverse of decompose: add tax at ``rate_percent`` on top of a net amount."""
    return to_decimal(net) * _factor(rate_percent)


def contained_tax(gross, rate_percent) -> Decimal:
    return decompose(gross, rate_percent).tax
