# report_route.py
import logging
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from deps import current_user_id, get_store
from models import BillRead, CustomerRead
from reports import (
  DashboardMetrics,
  GstSummary,
  StockLine,
  customer_name_for,
  customer_names,
  dashboard_metrics,
  gst_summary,
  inventory_value,
  stock_summary,
)
from storage import BillStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reports"])

RECENT_LIMIT = 5


class StockReport(BaseModel):
  items: Dict[str, StockLine]
  inventory_value: Decimal


class DashboardReport(BaseModel):
  metrics: DashboardMetrics
  recent_bills: List[BillRead]
  recent_customers: List[CustomerRead]


class FeedbackMetadata(BaseModel):
  page: str
  timestamp: str
  browser_info: str


class Feedback(BaseModel):
  type: Literal["bug", "feature", "general"]
  message: str = Field(min_length=10)
  metadata: Optional[FeedbackMetadata] = None


@router.get("/reports/gst", response_model=GstSummary)
def gst_report(request: Request, user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  rate = request.app.state.settings.default_gst_rate
  return gst_summary(store.get_bills_for_user(user_id), rate=rate)


@router.get("/reports/stock", response_model=StockReport)
def stock_report(user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  summary = stock_summary(store.get_bills_for_user(user_id))
  return StockReport(items=summary, inventory_value=inventory_value(summary))


@router.get("/reports/dashboard", response_model=DashboardReport)
def dashboard_report(user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  bills = store.get_bills_for_user(user_id)
  customers = store.get_customers_for_user(user_id)
  names = customer_names(customers)
  return DashboardReport(
    metrics=dashboard_metrics(bills, customers),
    recent_bills=[BillRead.from_bill(b, customer_name_for(b, names)) for b in bills[:RECENT_LIMIT]],
    recent_customers=[CustomerRead.model_validate(c) for c in customers[:RECENT_LIMIT]],
  )


@router.post("/feedback")
def submit_feedback(payload: Feedback, user_id: int = Depends(current_user_id)):
  logger.info(
    "Feedback (%s) from user %s: %s", payload.type, user_id, payload.message,
    extra={"details": payload.model_dump()},
  )
  return {"ok": True}

