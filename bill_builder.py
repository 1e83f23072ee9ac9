# bill_builder.py
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from errors import ValidationError
from gst import DEFAULT_GST_RATE, compute_gst, round_money, to_decimal

BillStatus = Literal["unpaid", "paid", "overdue"]
BILL_STATUSES = ("unpaid", "paid", "overdue")

RECORD_FIELDS = ("description", "quantity", "unit_price", "gst_rate")


class LineItem(BaseModel):
  description: str
  quantity: int
  unit_price: Decimal
  # None means "use the bill's rate"
  gst_rate: Optional[Decimal] = None

  def to_record(self) -> Dict[str, Any]:
    return {
      "description": self.description,
      "quantity": self.quantity,
      "unit_price": self.unit_price,
      "gst_rate": self.gst_rate,
    }

  @classmethod
  def from_record(cls, record: Mapping[str, Any]) -> "LineItem":
    return cls(**{k: record[k] for k in RECORD_FIELDS})

  @property
  def amount(self) -> Decimal:
    return round_money(self.quantity * self.unit_price)


class BillDraft(BaseModel):
  customer_id: int
  bill_number: str
  issue_date: date
  due_date: date
  gst_rate: Decimal = DEFAULT_GST_RATE
  subtotal: Decimal
  cgst: Decimal
  sgst: Decimal
  total: Decimal
  status: BillStatus = "unpaid"
  items: List[LineItem] = Field(default_factory=list)


# limits match the bills / bill_items column sizes in models.py
PRICE_PLACES = 4
RATE_PLACES = 4
MAX_QUANTITY = 2_147_483_647
MAX_UNIT_PRICE = Decimal("10000000000")
MAX_GST_RATE = Decimal("100")
MAX_BILL_TOTAL = Decimal("1000000000000")


def _places(value: Decimal) -> int:
  return max(0, -value.normalize().as_tuple().exponent)


def _rate_errors(field: str, rate: Decimal) -> List[Dict[str, str]]:
  if rate < 0:
    return [{"field": field, "message": "GST rate cannot be negative"}]
  if rate > MAX_GST_RATE:
    return [{"field": field, "message": f"GST rate cannot exceed {MAX_GST_RATE}%"}]
  if _places(rate) > RATE_PLACES:
    return [{"field": field, "message": f"GST rate allows at most {RATE_PLACES} decimal places"}]
  return []


def _item_errors(index: int, item: LineItem) -> List[Dict[str, str]]:
  prefix = f"items[{index}]"
  errors = []
  if not item.description or not item.description.strip():
    errors.append({"field": f"{prefix}.description", "message": "Description is required"})
  if item.quantity < 1:
    errors.append({"field": f"{prefix}.quantity", "message": "Quantity must be at least 1"})
  elif item.quantity > MAX_QUANTITY:
    errors.append({"field": f"{prefix}.quantity", "message": f"Quantity cannot exceed {MAX_QUANTITY}"})
  if item.unit_price < 0:
    errors.append({"field": f"{prefix}.unit_price", "message": "Price cannot be negative"})
  elif item.unit_price >= MAX_UNIT_PRICE:
    errors.append({"field": f"{prefix}.unit_price", "message": f"Price must be below {MAX_UNIT_PRICE}"})
  elif _places(item.unit_price) > PRICE_PLACES:
    errors.append({"field": f"{prefix}.unit_price", "message": f"Price allows at most {PRICE_PLACES} decimal places"})
  if item.gst_rate is not None:
    errors.extend(_rate_errors(f"{prefix}.gst_rate", item.gst_rate))
  return errors


def validate_bill(
  bill_number: str,
  issue_date: date,
  due_date: date,
  items: Sequence[LineItem],
  gst_rate: Decimal,
) -> None:
  errors: List[Dict[str, str]] = []
  if not bill_number or not bill_number.strip():
    errors.append({"field": "bill_number", "message": "Bill number is required"})
  if due_date < issue_date:
    errors.append({"field": "due_date", "message": "Due date cannot be before the bill date"})
  errors.extend(_rate_errors("gst_rate", gst_rate))
  if not items:
    errors.append({"field": "items", "message": "At least one item is required"})
  for i, item in enumerate(items):
    errors.extend(_item_errors(i, item))
  if errors:
    raise ValidationError("Invalid bill", errors)


def build_bill(
  customer_id: int,
  bill_number: str,
  issue_date: date,
  due_date: date,
  items: Sequence[LineItem],
  gst_rate=DEFAULT_GST_RATE,
) -> BillDraft:
  """Compute an unpaid bill draft from its line items.

  Every per-item amount and tax share is rounded to paise before it is
  summed, so totals never carry float drift. Items without their own rate
  take ``gst_rate``.
  """
  bill_rate = to_decimal(gst_rate)
  validate_bill(bill_number, issue_date, due_date, items, bill_rate)

  resolved: List[LineItem] = []
  subtotal = Decimal("0.00")
  cgst = Decimal("0.00")
  for item in items:
    rate = bill_rate if item.gst_rate is None else item.gst_rate
    line = item.model_copy(update={"gst_rate": rate})
    amount = line.amount
    subtotal += amount
    cgst += compute_gst(amount, rate).cgst
    resolved.append(line)

  sgst = cgst
  total = subtotal + cgst + sgst
  if total >= MAX_BILL_TOTAL:
    raise ValidationError("Invalid bill", [{"field": "items", "message": f"Bill total must be below {MAX_BILL_TOTAL}"}])

  return BillDraft(
    customer_id=customer_id,
    bill_number=bill_number,
    issue_date=issue_date,
    due_date=due_date,
    gst_rate=bill_rate,
    subtotal=subtotal,
    cgst=cgst,
    sgst=sgst,
    total=total,
    status="unpaid",
    items=resolved,
  )
