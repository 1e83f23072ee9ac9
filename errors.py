# errors.py
from typing import Dict, List, Optional


class BillingError(Exception):
  status_code = 400

  def __init__(self, message: str):
    super().__init__(message)
    self.message = message

  def to_body(self) -> dict:
    return {"detail": self.message}


class ValidationError(BillingError):
  """Malformed or out-of-range bill / line item fields.

  ``errors`` holds one ``{"field": ..., "message": ...}`` entry per problem.
  """

  status_code = 400

  def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
    super().__init__(message)
    self.errors = errors or []

  def to_body(self) -> dict:
    return {"detail": self.message, "errors": self.errors}


class NotFoundError(BillingError):
  status_code = 404


class AuthorizationError(BillingError):
  status_code = 403
