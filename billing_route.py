# billing_route.py
import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from bill_builder import BillStatus, LineItem, build_bill
from deps import current_user_id, get_store
from gst import DEFAULT_GST_RATE
from models import BillRead, CustomerCreate, CustomerRead
from reports import customer_name_for, customer_names
from storage import BillStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["billing"])


class BillCreate(BaseModel):
  # totals are always recomputed server-side; extra fields are ignored
  customer_id: int
  bill_number: str
  issue_date: date
  due_date: date
  gst_rate: Decimal = DEFAULT_GST_RATE
  items: List[LineItem]


class StatusUpdate(BaseModel):
  status: BillStatus


def _match(q: str, *values: str) -> bool:
  ql = q.strip().lower()
  return any(ql in (v or "").lower() for v in values)


@router.get("/customers", response_model=List[CustomerRead])
def list_customers(q: Optional[str] = None, user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  rows = store.get_customers_for_user(user_id)
  if not q:
    return rows
  return [r for r in rows if _match(q, r.name, r.email, r.phone)]


@router.get("/customers/{customer_id}", response_model=CustomerRead)
def get_customer(customer_id: int, user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  return store.get_customer(customer_id, user_id)


@router.post("/customers", response_model=CustomerRead)
def create_customer(c: CustomerCreate, user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  logger.info("Creating customer %r for user %s", c.name, user_id)
  customer = store.create_customer(user_id, c)
  logger.info("Customer created (id=%s)", customer.id)
  return customer


@router.get("/bills", response_model=List[BillRead])
def list_bills(q: Optional[str] = None, user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  names = customer_names(store.get_customers_for_user(user_id))
  rows = [BillRead.from_bill(b, customer_name_for(b, names)) for b in store.get_bills_for_user(user_id)]
  if not q:
    return rows
  return [r for r in rows if _match(q, r.bill_number, r.customer_name, r.status)]


@router.get("/bills/{bill_id}", response_model=BillRead)
def get_bill(bill_id: int, user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  bill = store.get_bill(bill_id, user_id)
  names = customer_names(store.get_customers_for_user(user_id))
  return BillRead.from_bill(bill, customer_name_for(bill, names))


@router.post("/bills", response_model=BillRead)
def create_bill(payload: BillCreate, user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  draft = build_bill(
    payload.customer_id,
    payload.bill_number,
    payload.issue_date,
    payload.due_date,
    payload.items,
    gst_rate=payload.gst_rate,
  )
  bill = store.create_bill(user_id, draft)
  customer = store.get_customer(bill.customer_id, user_id)
  logger.info("Bill %s created (id=%s, total=%s)", bill.bill_number, bill.id, bill.total)
  return BillRead.from_bill(bill, customer.name)


@router.patch("/bills/{bill_id}/status", response_model=BillRead)
def update_bill_status(bill_id: int, payload: StatusUpdate, user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  bill = store.update_status(bill_id, user_id, payload.status)
  logger.info("Bill %s marked %s by user %s", bill.id, bill.status, user_id)
  names = customer_names(store.get_customers_for_user(user_id))
  return BillRead.from_bill(bill, customer_name_for(bill, names))
