import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./parkshare.db")

# Firebase Configuration (ID tokens are issued by Firebase Auth)
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Redis is optional: rate limit counters and spot change fan-out
REDIS_URL = os.getenv("REDIS_URL")

# Frontend base URL, used for CORS defaults
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:5173").split(",")

# Booking rules
MAX_BOOKING_HOURS = int(os.getenv("MAX_BOOKING_HOURS", "24"))
# Owner dashboard shows at most this many received bookings
OWNER_BOOKINGS_LIMIT = int(os.getenv("OWNER_BOOKINGS_LIMIT", "100"))

# Rate limiting
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
BOOKING_RATE_LIMIT = int(os.getenv("BOOKING_RATE_LIMIT", "10"))  # per minute per IP
REQUEST_RATE_LIMIT = int(os.getenv("REQUEST_RATE_LIMIT", "20"))  # per hour per IP

# Background worker
BOOKING_COMPLETION_INTERVAL_MINUTES = int(os.getenv("BOOKING_COMPLETION_INTERVAL_MINUTES", "5"))
