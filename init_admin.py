import os

from dotenv import load_dotenv

from servicebook.config import settings
from servicebook.database import SessionLocal
from servicebook.enums import Role
from servicebook.models import Company, User
from servicebook.security import hash_password


# ======================================================
# ENV
# ======================================================

load_dotenv()

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
PLATFORM_COMPANY_NAME = os.getenv("PLATFORM_COMPANY_NAME", "Platform")

if not ADMIN_EMAIL or not ADMIN_PASSWORD:
    raise RuntimeError("ADMIN_EMAIL and ADMIN_PASSWORD must be set")

ADMIN_EMAIL = ADMIN_EMAIL.strip().lower()
