# auth_route.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from deps import current_user_id, get_store
from models import UserRead
from storage import BillStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
  username: str = Field(min_length=3)
  password: str = Field(min_length=6)


class RegisterRequest(LoginRequest):
  business_name: str = Field(min_length=1)


def _user_out(user) -> UserRead:
  return UserRead(id=user.id, username=user.username, business_name=user.business_name)


@router.post("/register", response_model=UserRead)
def register(payload: RegisterRequest, request: Request, store: BillStore = Depends(get_store)):
  user = store.create_user(payload.username, payload.password, payload.business_name)
  request.session["user_id"] = user.id
  logger.info("Registered user %s (id=%s)", user.username, user.id)
  return _user_out(user)


@router.post("/login", response_model=UserRead)
def login(payload: LoginRequest, request: Request, store: BillStore = Depends(get_store)):
  user = store.authenticate(payload.username, payload.password)
  if not user:
    logger.warning("Failed login for %s", payload.username)
    raise HTTPException(status_code=401, detail="Invalid username or password")
  request.session["user_id"] = user.id
  return _user_out(user)


@router.get("/me", response_model=UserRead)
def me(user_id: int = Depends(current_user_id), store: BillStore = Depends(get_store)):
  user = store.get_user(user_id)
  if not user:
    raise HTTPException(status_code=401, detail="User not found")
  return _user_out(user)


@router.post("/logout")
def logout(request: Request):
  request.session.clear()
  return {"message": "Logged out successfully"}
