import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./fleetops.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# JWT access tokens issued by /auth/login
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))

# Frontend base URL (used for CORS defaults)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000").split(",")
    if origin.strip()
]

# Work order pricing
DEFAULT_TAX_RATE = float(os.getenv("DEFAULT_TAX_RATE", "0.08"))  # 8% unless the shop overrides it

# Maintenance due-soon thresholds
MAINTENANCE_DUE_SOON_DAYS = int(os.getenv("MAINTENANCE_DUE_SOON_DAYS", "7"))
# Fraction of the interval left before an hours/mileage item is flagged as due soon
MAINTENANCE_DUE_SOON_RATIO = float(os.getenv("MAINTENANCE_DUE_SOON_RATIO", "0.1"))

# Voyage reports
VOYAGE_REPORT_AUTHORITY = os.getenv("VOYAGE_REPORT_AUTHORITY", "Transport Canada")
