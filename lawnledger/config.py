import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./lawnledger.db")

# Frontend base URL for CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# How many user-facing notifications the in-memory channel keeps around
NOTIFICATION_HISTORY_LIMIT = int(os.getenv("NOTIFICATION_HISTORY_LIMIT", "50"))

# Customer group form defaults
DEFAULT_GROUP_COLOR = os.getenv("DEFAULT_GROUP_COLOR", "#9333ea")
DEFAULT_GROUP_WORK_MINUTES = int(os.getenv("DEFAULT_GROUP_WORK_MINUTES", "60"))
