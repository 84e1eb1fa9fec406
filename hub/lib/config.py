"""
Configuration settings for Channel Hub.
Values come from the environment, with the project .env loaded first.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(PROJECT_ROOT / ".env")

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = (
    os.getenv("SUPABASE_ANON_KEY", "")
    or os.getenv("SUPABASE_KEY", "")
)

# API server
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]
DASHBOARD_PORT = int(os.getenv("DASHBOARD_PORT", "8001"))
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Live refresh poll interval (seconds)
LIVE_REFRESH_SECONDS = float(os.getenv("LIVE_REFRESH_SECONDS", "30"))

# Transient success messages are dismissed by the frontend after this delay
SUCCESS_MESSAGE_TTL_MS = 3000
