# deps.py
from fastapi import Depends, HTTPException, Request
from sqlmodel import Session

from db import get_session
from storage import BillStore


def get_store(session: Session = Depends(get_session)) -> BillStore:
  return BillStore(session)


def current_user_id(request: Request) -> int:
  user_id = request.session.get("user_id")
  if not user_id:
    raise HTTPException(status_code=401, detail="Unauthorized")
  return user_id
