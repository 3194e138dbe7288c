"""
Runtime configuration for the suggestion module.
Values come from environment variables, optionally loaded from a .env file.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

MODULE_DIR = Path(__file__).parent
PROJECT_ROOT = MODULE_DIR.parent

# Load .env from backend directory or project root
env_path = PROJECT_ROOT / "backend" / ".env"
if not env_path.exists():
    env_path = PROJECT_ROOT / ".env"
if env_path.exists():
    load_dotenv(env_path)
else:
    load_dotenv()

DEFAULT_CATALOG_PATH = MODULE_DIR / "data" / "prk_sample.json"
CATALOG_PATH = Path(os.getenv("SUGGEST_CATALOG_PATH", str(DEFAULT_CATALOG_PATH)))

# One canonical configuration shared by the server and the fallback client.
# A cutoff of 70 on RapidFuzz's 0-100 scale mirrors a 0.3 distance threshold.
SUGGEST_LIMIT = int(os.getenv("SUGGEST_LIMIT", "12"))
SUGGEST_SCORE_CUTOFF = float(os.getenv("SUGGEST_SCORE_CUTOFF", "70"))

# Request boundary
SUGGEST_REQUEST_TIMEOUT = float(os.getenv("SUGGEST_REQUEST_TIMEOUT", "5"))
SUGGEST_HOST = os.getenv("SUGGEST_HOST", "0.0.0.0")
SUGGEST_PORT = int(os.getenv("SUGGEST_PORT", "8000"))
SUGGEST_CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("SUGGEST_CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

# Caller-side fallback client
SUGGEST_CLIENT_RETRIES = int(os.getenv("SUGGEST_CLIENT_RETRIES", "1"))
SUGGEST_CLIENT_BACKOFF = float(os.getenv("SUGGEST_CLIENT_BACKOFF", "0.25"))
