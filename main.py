# main.py
import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from starlette.middleware.sessions import SessionMiddleware

from auth_route import router as auth_router
from billing_route import router as billing_router
from config import DEFAULT_SESSION_SECRET, Settings
from db import init_db, make_engine
from errors import BillingError
from logs import LogBuffer, configure_logging
from report_route import router as report_router

logger = logging.getLogger(__name__)


def _install_log_buffer(level: str) -> LogBuffer:
  root = logging.getLogger()
  for handler in list(root.handlers):
    if isinstance(handler, LogBuffer):
      root.removeHandler(handler)
  buffer = LogBuffer(level=level)
  root.addHandler(buffer)
  return buffer


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
  settings = settings or Settings.from_env()
  configure_logging(settings.log_level)

  if settings.session_secret == DEFAULT_SESSION_SECRET:
    logger.warning("SESSION_SECRET is not set; using the built-in development secret")

  engine = engine or make_engine(settings.database_url)
  init_db(engine)

  app = FastAPI(title="GST Billing Backend", version="1.0.0")
  app.state.settings = settings
  app.state.engine = engine
  app.state.log_buffer = _install_log_buffer(settings.log_level)

  app.add_middleware(SessionMiddleware, secret_key=settings.session_secret, same_site="lax")
  app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
  )

  @app.exception_handler(BillingError)
  async def billing_error_handler(request: Request, exc: BillingError):
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())

  @app.get("/health")
  def health():
    return {"ok": True}

  app.include_router(auth_router)
  app.include_router(billing_router)
  app.include_router(report_router)
  return app


# no module-level app: run with `uvicorn main:create_app --factory`
if __name__ == "__main__":
  import uvicorn
  port = int(os.getenv("PORT", 8000))
  uvicorn.run(create_app(), host="0.0.0.0", port=port)
