"""Shared fixtures: a fresh in-memory database and app per test."""
import pytest
from fastapi.testclient import TestClient

from config import Settings
from db import make_engine
from main import create_app


@pytest.fixture
def app():
  settings = Settings(database_url="sqlite://", session_secret="test-secret")
  return create_app(settings=settings, engine=make_engine(settings.database_url))


@pytest.fixture
def client(app):
  return TestClient(app)


def register(client, username="shopkeeper", password="secret123", business_name="Sharma Traders"):
  resp = client.post(
    "/api/auth/register",
    json={"username": username, "password": password, "business_name": business_name},
  )
  assert resp.status_code == 200, resp.text
  return resp.json()


def add_customer(client, name="Apex Retail Pvt Ltd"):
  resp = client.post(
    "/api/customers",
    json={"name": name, "email": "accounts@apex.in", "phone": "9876543210", "address": "MG Road, Pune"},
  )
  assert resp.status_code == 200, resp.text
  return resp.json()


def bill_payload(customer_id, bill_number="INV-001", issue_date="2026-10-05", items=None, **extra):
  payload = {
    "customer_id": customer_id,
    "bill_number": bill_number,
    "issue_date": issue_date,
    "due_date": "2026-11-05",
    "items": items if items is not None else [
      {"description": "Widget", "quantity": 2, "unit_price": 100, "gst_rate": 18},
    ],
  }
  payload.update(extra)
  return payload


@pytest.fixture
def auth_client(client):
  register(client)
  return client


@pytest.fixture
def other_client(app):
  """A second browser session logged in as a different business."""
  c = TestClient(app)
  register(c, username="rivalshop", business_name="Rival Stores")
  return c
