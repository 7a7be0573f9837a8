import os
from dotenv import load_dotenv

load_dotenv()

# --- App ---
APP_NAME = os.getenv("APP_NAME", "OptiLife")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- AI (comma-separated for rotation) ---
GEMINI_API_KEYS = [k.strip() for k in os.getenv("GEMINI_API_KEYS", "").split(",") if k.strip()]
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

# --- Supabase Auth ---
# Access tokens are issued by Supabase Auth and signed with the project's JWT secret.
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET", "change-this-secret-key")
JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")


# --- Database ---
def normalize_database_url(url: str) -> str:
    """Point bare postgres URLs at the psycopg (v3) driver."""
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


# Default to local SQLite, but prefer environment variable (Supabase Postgres in production)
DATABASE_URL = normalize_database_url(os.getenv("DATABASE_URL", "sqlite:///./data/optilife.db"))

# --- Badges ---
# Calendar days for streaks are computed in this zone.
BADGE_TIMEZONE = os.getenv("BADGE_TIMEZONE", "UTC")
