from decimal import Decimal

from sqlmodel import Session

from conftest import add_customer, bill_payload
from models import Customer


def test_create_and_list_customers(auth_client) -> None:
  created = add_customer(auth_client)
  assert created["name"] == "Apex Retail Pvt Ltd"

  rows = auth_client.get("/api/customers").json()
  assert [r["id"] for r in rows] == [created["id"]]

  assert auth_client.get("/api/customers", params={"q": "apex"}).json()[0]["id"] == created["id"]
  assert auth_client.get("/api/customers", params={"q": "zzz"}).json() == []


def test_customer_missing_field(auth_client) -> None:
  resp = auth_client.post("/api/customers", json={"name": "No Email"})
  assert resp.status_code == 422


def test_create_bill_computes_totals(auth_client) -> None:
  customer = add_customer(auth_client)
  resp = auth_client.post("/api/bills", json=bill_payload(customer["id"]))
  assert resp.status_code == 200, resp.text
  bill = resp.json()
  assert Decimal(bill["subtotal"]) == Decimal("200")
  assert Decimal(bill["cgst"]) == Decimal("18")
  assert Decimal(bill["sgst"]) == Decimal("18")
  assert Decimal(bill["total"]) == Decimal("236")
  assert bill["status"] == "unpaid"
  assert bill["customer_name"] == "Apex Retail Pvt Ltd"
  assert bill["items"][0]["description"] == "Widget"
  assert bill["items"][0]["quantity"] == 2


def test_client_totals_are_ignored(auth_client) -> None:
  customer = add_customer(auth_client)
  payload = bill_payload(customer["id"], subtotal=1, cgst=0, sgst=0, total=1, status="paid")
  bill = auth_client.post("/api/bills", json=payload).json()
  assert Decimal(bill["total"]) == Decimal("236")
  assert bill["status"] == "unpaid"


def test_mixed_rate_bill(auth_client) -> None:
  customer = add_customer(auth_client)
  items = [
    {"description": "A", "quantity": 1, "unit_price": 50, "gst_rate": 0},
    {"description": "B", "quantity": 3, "unit_price": 10, "gst_rate": 18},
  ]
  bill = auth_client.post("/api/bills", json=bill_payload(customer["id"], items=items)).json()
  assert Decimal(bill["subtotal"]) == Decimal("80")
  assert Decimal(bill["cgst"]) == Decimal("2.7")
  assert Decimal(bill["total"]) == Decimal("85.4")
  assert [i["description"] for i in bill["items"]] == ["A", "B"]


def test_item_rate_defaults_to_bill_rate(auth_client) -> None:
  customer = add_customer(auth_client)
  items = [{"description": "Service", "quantity": 1, "unit_price": 1000}]
  bill = auth_client.post("/api/bills", json=bill_payload(customer["id"], items=items, gst_rate=12)).json()
  assert Decimal(bill["items"][0]["gst_rate"]) == Decimal("12")
  assert Decimal(bill["total"]) == Decimal("1120")


def test_invalid_items_give_field_errors(auth_client) -> None:
  customer = add_customer(auth_client)
  items = [{"description": "", "quantity": 0, "unit_price": -5, "gst_rate": 18}]
  resp = auth_client.post("/api/bills", json=bill_payload(customer["id"], items=items))
  assert resp.status_code == 400
  body = resp.json()
  assert body["detail"] == "Invalid bill"
  assert [e["field"] for e in body["errors"]] == [
    "items[0].description", "items[0].quantity", "items[0].unit_price",
  ]


def test_empty_bill_rejected(auth_client) -> None:
  customer = add_customer(auth_client)
  resp = auth_client.post("/api/bills", json=bill_payload(customer["id"], items=[]))
  assert resp.status_code == 400


def test_bill_for_missing_customer(auth_client) -> None:
  resp = auth_client.post("/api/bills", json=bill_payload(999))
  assert resp.status_code == 404


def test_bills_listed_newest_first(auth_client) -> None:
  customer = add_customer(auth_client)
  auth_client.post("/api/bills", json=bill_payload(customer["id"], "INV-001", "2026-09-01"))
  auth_client.post("/api/bills", json=bill_payload(customer["id"], "INV-002", "2026-10-01"))
  auth_client.post("/api/bills", json=bill_payload(customer["id"], "INV-003", "2026-08-01"))
  numbers = [b["bill_number"] for b in auth_client.get("/api/bills").json()]
  assert numbers == ["INV-002", "INV-001", "INV-003"]


def test_status_transitions(auth_client) -> None:
  customer = add_customer(auth_client)
  bill = auth_client.post("/api/bills", json=bill_payload(customer["id"])).json()
  url = f"/api/bills/{bill['id']}/status"

  for status in ("paid", "overdue", "unpaid", "paid"):
    resp = auth_client.patch(url, json={"status": status})
    assert resp.status_code == 200
    assert resp.json()["status"] == status

  assert auth_client.get(f"/api/bills/{bill['id']}").json()["status"] == "paid"


def test_unknown_status_rejected(auth_client) -> None:
  customer = add_customer(auth_client)
  bill = auth_client.post("/api/bills", json=bill_payload(customer["id"])).json()
  resp = auth_client.patch(f"/api/bills/{bill['id']}/status", json={"status": "cancelled"})
  assert resp.status_code == 422


def test_status_update_missing_bill(auth_client) -> None:
  resp = auth_client.patch("/api/bills/12345/status", json={"status": "paid"})
  assert resp.status_code == 404


def test_deleted_customer_shows_placeholder(app, auth_client) -> None:
  customer = add_customer(auth_client)
  bill = auth_client.post("/api/bills", json=bill_payload(customer["id"])).json()

  with Session(app.state.engine) as session:
    session.delete(session.get(Customer, customer["id"]))
    session.commit()

  rows = auth_client.get("/api/bills").json()
  assert rows[0]["id"] == bill["id"]
  assert rows[0]["customer_name"] == "Unknown Customer"
  assert auth_client.get(f"/api/bills/{bill['id']}").json()["customer_name"] == "Unknown Customer"


def test_bill_search(auth_client) -> None:
  customer = add_customer(auth_client)
  auth_client.post("/api/bills", json=bill_payload(customer["id"], "INV-001"))
  auth_client.post("/api/bills", json=bill_payload(customer["id"], "INV-777"))
  found = auth_client.get("/api/bills", params={"q": "777"}).json()
  assert [b["bill_number"] for b in found] == ["INV-777"]
