# gst.py
"""GST math for intra-state bills.

India's dual GST splits the rate evenly into a central (CGST) and a state
(SGST) share. Amounts are Decimals rounded half-up to ₹0.01.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple, Union

from errors import ValidationError

ROUND = Decimal("0.01")
DEFAULT_GST_RATE = Decimal("18")
GST_RATES = (0, 5, 12, 18, 28)

Number = Union[Decimal, int, float, str]


class GstBreakup(NamedTuple):
  cgst: Decimal
  sgst: Decimal
  total: Decimal


def to_decimal(value: Number) -> Decimal:
  if isinstance(value, Decimal):
    return value
  # str() keeps 0.1 as 0.1 instead of its binary expansion
  return Decimal(str(value))


def round_money(value: Number) -> Decimal:
  return to_decimal(value).quantize(ROUND, rounding=ROUND_HALF_UP)


def compute_gst(base_amount: Number, rate_percent: Number = DEFAULT_GST_RATE) -> GstBreakup:
  """Split GST on ``base_amount`` at ``rate_percent`` into CGST and SGST.

  Each share is ``base × rate / 200`` rounded to paise; SGST always equals
  CGST. Negative amounts or rates raise ``ValidationError``.
  """
  base = to_decimal(base_amount)
  rate = to_decimal(rate_percent)

  errors = []
  if base < 0:
    errors.append({"field": "base_amount", "message": "Amount cannot be negative"})
  if rate < 0:
    errors.append({"field": "rate_percent", "message": "GST rate cannot be negative"})
  if errors:
    raise ValidationError("Invalid GST input", errors)

  half = round_money(base * rate / Decimal("200"))
  return GstBreakup(cgst=half, sgst=half, total=round_money(base + half + half))
