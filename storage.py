# storage.py
import logging
from typing import List, Optional

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, VerifyMismatchError
from sqlmodel import Session, select

from bill_builder import BILL_STATUSES, BillDraft
from errors import AuthorizationError, NotFoundError, ValidationError
from models import Bill, BillItem, Customer, CustomerCreate, User

logger = logging.getLogger(__name__)

ph = PasswordHasher()


def hash_password(password: str) -> str:
  return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
  try:
    return ph.verify(password_hash, password)
  except VerifyMismatchError:
    return False
  except VerificationError as exc:
    logger.error("argon2 verification error: %s", exc)
    raise


class BillStore:
  """Users, customers and bills, always scoped to the owning user.

  Single-row lookups check ownership and raise ``AuthorizationError`` for
  another user's row, so a guessed id never leaks across tenants.
  """

  def __init__(self, session: Session):
    self.session = session

  # ----- Users -----

  def get_user(self, user_id: int) -> Optional[User]:
    return self.session.get(User, user_id)

  def get_user_by_username(self, username: str) -> Optional[User]:
    return self.session.exec(select(User).where(User.username == username)).first()

  def create_user(self, username: str, password: str, business_name: str) -> User:
    if self.get_user_by_username(username):
      raise ValidationError("Username already exists", [{"field": "username", "message": "Username already exists"}])
    user = User(username=username, password_hash=hash_password(password), business_name=business_name)
    self.session.add(user)
    self.session.commit()
    self.session.refresh(user)
    return user

  def authenticate(self, username: str, password: str) -> Optional[User]:
    user = self.get_user_by_username(username)
    if not user or not verify_password(password, user.password_hash):
      return None
    return user

  # ----- Customers -----

  def get_customer(self, customer_id: int, user_id: int) -> Customer:
    customer = self.session.get(Customer, customer_id)
    if not customer:
      raise NotFoundError("Customer not found")
    if customer.user_id != user_id:
      raise AuthorizationError("Customer belongs to another user")
    return customer

  def get_customers_for_user(self, user_id: int) -> List[Customer]:
    return list(self.session.exec(
      select(Customer).where(Customer.user_id == user_id).order_by(Customer.id.desc())
    ).all())

  def create_customer(self, user_id: int, data: CustomerCreate) -> Customer:
    customer = Customer(user_id=user_id, **data.model_dump())
    self.session.add(customer)
    self.session.commit()
    self.session.refresh(customer)
    return customer

  # ----- Bills -----

  def get_bill(self, bill_id: int, user_id: int) -> Bill:
    bill = self.session.get(Bill, bill_id)
    if not bill:
      raise NotFoundError("Bill not found")
    if bill.user_id != user_id:
      raise AuthorizationError("Bill belongs to another user")
    return bill

  def get_bills_for_user(self, user_id: int) -> List[Bill]:
    return list(self.session.exec(
      select(Bill).where(Bill.user_id == user_id).order_by(Bill.issue_date.desc(), Bill.id.desc())
    ).all())

  def create_bill(self, user_id: int, draft: BillDraft) -> Bill:
    self.get_customer(draft.customer_id, user_id)

    bill = Bill(
      user_id=user_id,
      **draft.model_dump(exclude={"items"}),
    )
    bill.items = [
      BillItem(position=pos, **item.to_record())
      for pos, item in enumerate(draft.items)
    ]
    self.session.add(bill)
    self.session.commit()
    self.session.refresh(bill)
    return bill

  def update_status(self, bill_id: int, user_id: int, status: str) -> Bill:
    if status not in BILL_STATUSES:
      raise ValidationError("Invalid status", [{"field": "status", "message": f"Status must be one of {', '.join(BILL_STATUSES)}"}])
    bill = self.get_bill(bill_id, user_id)
    bill.status = status
    self.session.add(bill)
    self.session.commit()
    self.session.refresh(bill)
    return bill
