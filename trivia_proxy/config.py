import os
from typing import List
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]

class Settings(BaseModel):
    opentdb_base_url: str = os.getenv("OPENTDB_BASE_URL", "https://opentdb.com")
    opentdb_timeout_seconds: float = float(os.getenv("OPENTDB_TIMEOUT_SECONDS", "10"))
    max_question_amount: int = int(os.getenv("MAX_QUESTION_AMOUNT", "50"))
    cors_allow_origins: List[str] = _split_origins(os.getenv("CORS_ALLOW_ORIGINS", "*"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()
