# db.py
from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine


def make_engine(database_url: str) -> Engine:
  if database_url.startswith("sqlite"):
    # one shared connection so an in-memory database survives across sessions
    return create_engine(
      database_url,
      echo=False,
      connect_args={"check_same_thread": False},
      poolclass=StaticPool,
    )
  return create_engine(database_url, echo=False, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
  SQLModel.metadata.create_all(engine)


def get_session(request: Request):
  with Session(request.app.state.engine) as session:
    yield session
