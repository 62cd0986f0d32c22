import logging
import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger("marketplace")

APP_ENV = os.getenv("APP_ENV", "production").strip().lower()

# Database
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "marketplace")

# Security
_DEV_SECRET = "dev-secret-change-me"
JWT_SECRET = os.getenv("JWT_SECRET", "").strip()
JWT_PREVIOUS_SECRETS = [s.strip() for s in os.getenv("JWT_PREVIOUS_SECRETS", "").split(",") if s.strip()]
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
TOKEN_TTL = timedelta(minutes=int(os.getenv("TOKEN_TTL_MINUTES", "60")))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# HTTP
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
PORT = int(os.getenv("PORT", "8000"))


def signing_secret() -> str:
    """Current token signing secret; only development may run without one."""
    if JWT_SECRET:
        return JWT_SECRET
    if APP_ENV == "development":
        logger.warning("JWT_SECRET not set, using the development secret")
        return _DEV_SECRET
    raise RuntimeError("JWT_SECRET environment variable is required")
