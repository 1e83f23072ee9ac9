# config.py
import os
from decimal import Decimal
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_SESSION_SECRET = "billing-app-secret"


class Settings(BaseModel):
  database_url: str
  session_secret: str = DEFAULT_SESSION_SECRET
  cors_origins: List[str] = Field(default_factory=lambda: ["http://127.0.0.1:5173", "http://localhost:5173"])
  log_level: str = "INFO"
  default_gst_rate: Decimal = Field(default=Decimal("18"), ge=0, le=100)

  @classmethod
  def from_env(cls) -> "Settings":
    load_dotenv()

    database_url = os.getenv("DATABASE_URL", "").strip()
    if not database_url:
      raise RuntimeError("DATABASE_URL is not set in backend .env")

    return cls(
      database_url=database_url,
      session_secret=os.getenv("SESSION_SECRET", DEFAULT_SESSION_SECRET).strip(),
      cors_origins=[
        x.strip()
        for x in os.getenv("CORS_ORIGINS", "http://127.0.0.1:5173,http://localhost:5173").split(",")
        if x.strip()
      ],
      log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
      default_gst_rate=os.getenv("DEFAULT_GST_RATE", "18").strip(),
    )
