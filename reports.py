# reports.py
"""Read-only rollups over a user's bills.

Every function here is pure: it takes already loaded bills (table rows,
``BillRead`` models or anything with the same attributes) and never
mutates them.
"""

import calendar
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from pydantic import BaseModel, Field, computed_field

from bill_builder import LineItem
from gst import DEFAULT_GST_RATE, compute_gst, round_money, to_decimal

UNKNOWN_CUSTOMER = "Unknown Customer"


class GstTotals(BaseModel):
  taxable: Decimal = Decimal("0.00")
  cgst: Decimal = Decimal("0.00")
  sgst: Decimal = Decimal("0.00")
  total: Decimal = Decimal("0.00")


class MonthBucket(BaseModel):
  label: str
  year: int
  month: int
  bill_count: int = 0
  taxable: Decimal = Decimal("0.00")
  cgst: Decimal = Decimal("0.00")
  sgst: Decimal = Decimal("0.00")


class GstSummary(BaseModel):
  rate: Decimal
  overall: GstTotals
  months: List[MonthBucket] = Field(default_factory=list)


class StockLine(BaseModel):
  total_quantity: int = 0
  total_value: Decimal = Decimal("0.00")

  @computed_field
  @property
  def unit_value(self) -> Decimal:
    return round_money(self.total_value / self.total_quantity)


class DashboardMetrics(BaseModel):
  total_revenue: Decimal
  unpaid_count: int
  bill_count: int
  customer_count: int


def _line_items(bill: Any) -> List[LineItem]:
  items = []
  for item in bill.items:
    if isinstance(item, LineItem):
      items.append(item)
    elif isinstance(item, Mapping):
      items.append(LineItem.from_record(item))
    else:
      items.append(LineItem(
        description=item.description,
        quantity=item.quantity,
        unit_price=item.unit_price,
        gst_rate=item.gst_rate,
      ))
  return items


def gst_summary(bills: Iterable[Any], rate=DEFAULT_GST_RATE) -> GstSummary:
  """GST collected overall and per calendar month.

  Tax is recomputed from each bill's stored subtotal at ``rate`` rather
  than read from the bill's own cgst/sgst columns. Months are ordered
  oldest first.
  """
  overall = GstTotals()
  buckets: Dict[tuple, MonthBucket] = {}

  for bill in bills:
    subtotal = to_decimal(bill.subtotal)
    gst = compute_gst(subtotal, rate)

    overall.taxable += subtotal
    overall.cgst += gst.cgst
    overall.sgst += gst.sgst
    overall.total += gst.total

    issued = bill.issue_date
    key = (issued.year, issued.month)
    bucket = buckets.get(key)
    if bucket is None:
      bucket = MonthBucket(
        label=f"{calendar.month_name[issued.month]} {issued.year}",
        year=issued.year,
        month=issued.month,
      )
      buckets[key] = bucket
    bucket.bill_count += 1
    bucket.taxable += subtotal
    bucket.cgst += gst.cgst
    bucket.sgst += gst.sgst

  months = [buckets[k] for k in sorted(buckets)]
  return GstSummary(rate=to_decimal(rate), overall=overall, months=months)


def stock_summary(bills: Iterable[Any]) -> Dict[str, StockLine]:
  """Quantity and value billed per item description, in first-seen order.

  Descriptions match exactly; "Widget" and "widget" are separate lines.
  """
  summary: Dict[str, StockLine] = {}
  for bill in bills:
    for item in _line_items(bill):
      line = summary.setdefault(item.description, StockLine())
      line.total_quantity += item.quantity
      line.total_value += item.amount
  return summary


def inventory_value(summary: Mapping[str, StockLine]) -> Decimal:
  return sum((line.total_value for line in summary.values()), Decimal("0.00"))


def dashboard_metrics(bills: Sequence[Any], customers: Sequence[Any] = ()) -> DashboardMetrics:
  # revenue counts every bill regardless of status; overdue is not "unpaid"
  return DashboardMetrics(
    total_revenue=sum((to_decimal(b.total) for b in bills), Decimal("0.00")),
    unpaid_count=sum(1 for b in bills if b.status == "unpaid"),
    bill_count=len(bills),
    customer_count=len(customers),
  )


def customer_names(customers: Iterable[Any]) -> Dict[int, str]:
  return {c.id: c.name for c in customers}


def customer_name_for(bill: Any, names: Mapping[int, str]) -> str:
  return names.get(bill.customer_id, UNKNOWN_CUSTOMER)
