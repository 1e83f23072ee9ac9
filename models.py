# models.py
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlmodel import Field, Relationship, SQLModel


def _utcnow() -> datetime:
  return datetime.now(timezone.utc)


class User(SQLModel, table=True):
  __tablename__ = "users"

  id: Optional[int] = Field(default=None, primary_key=True)
  username: str = Field(index=True, unique=True)
  password_hash: str
  business_name: str


class UserRead(SQLModel):
  id: int
  username: str
  business_name: str


class CustomerBase(SQLModel):
  name: str = Field(min_length=1)
  email: str
  phone: str
  address: str


class Customer(CustomerBase, table=True):
  __tablename__ = "customers"

  id: Optional[int] = Field(default=None, primary_key=True)
  user_id: int = Field(foreign_key="users.id", index=True)


class CustomerCreate(CustomerBase):
  pass


class CustomerRead(CustomerBase):
  id: int
  user_id: int


class Bill(SQLModel, table=True):
  __tablename__ = "bills"

  id: Optional[int] = Field(default=None, primary_key=True)
  user_id: int = Field(foreign_key="users.id", index=True)
  # soft reference: no FK so a bill outlives its customer
  customer_id: int = Field(index=True)
  bill_number: str
  issue_date: date
  due_date: date
  gst_rate: Decimal = Field(default=Decimal("18"), max_digits=7, decimal_places=4)
  subtotal: Decimal = Field(max_digits=14, decimal_places=2)
  cgst: Decimal = Field(max_digits=14, decimal_places=2)
  sgst: Decimal = Field(max_digits=14, decimal_places=2)
  total: Decimal = Field(max_digits=14, decimal_places=2)
  status: str = "unpaid"  # unpaid|paid|overdue
  created_at: datetime = Field(default_factory=_utcnow)

  items: List["BillItem"] = Relationship(
    back_populates="bill",
    sa_relationship_kwargs={"order_by": "BillItem.position", "cascade": "all, delete-orphan"},
  )


class BillItem(SQLModel, table=True):
  __tablename__ = "bill_items"

  id: Optional[int] = Field(default=None, primary_key=True)
  bill_id: int = Field(foreign_key="bills.id", index=True)
  position: int = 0
  description: str
  quantity: int
  # sized to the limits enforced in bill_builder
  unit_price: Decimal = Field(max_digits=14, decimal_places=4)
  gst_rate: Decimal = Field(max_digits=7, decimal_places=4)

  bill: Optional[Bill] = Relationship(back_populates="items")


class BillItemRead(SQLModel):
  description: str
  quantity: int
  unit_price: Decimal
  gst_rate: Decimal


class BillRead(SQLModel):
  id: int
  customer_id: int
  customer_name: Optional[str] = None
  bill_number: str
  issue_date: date
  due_date: date
  gst_rate: Decimal
  subtotal: Decimal
  cgst: Decimal
  sgst: Decimal
  total: Decimal
  status: str
  created_at: Optional[datetime] = None
  items: List[BillItemRead] = []

  @classmethod
  def from_bill(cls, bill: Bill, customer_name: Optional[str] = None) -> "BillRead":
    return cls(
      id=bill.id,
      customer_id=bill.customer_id,
      customer_name=customer_name,
      bill_number=bill.bill_number,
      issue_date=bill.issue_date,
      due_date=bill.due_date,
      gst_rate=bill.gst_rate,
      subtotal=bill.subtotal,
      cgst=bill.cgst,
      sgst=bill.sgst,
      total=bill.total,
      status=bill.status,
      created_at=bill.created_at,
      items=[
        BillItemRead(
          description=i.description,
          quantity=i.quantity,
          unit_price=i.unit_price,
          gst_rate=i.gst_rate,
        )
        for i in bill.items
      ],
    )
