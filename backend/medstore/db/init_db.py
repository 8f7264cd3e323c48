"""Create all tables and the bootstrap admin. Run on app startup.

When ADMIN_PASSWORD is not configured a random password is generated and
printed once. Change it after first login.
"""
import logging
import secrets

from medstore.core.config import settings
from medstore.db.base import Base
from medstore.db.session import engine, SessionLocal
from medstore.models import store, medicine, billing, user  # noqa: F401 - register models
from medstore.services.user_service import ensure_admin_account

logger = logging.getLogger(__name__)


def init_db():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        password = settings.ADMIN_PASSWORD or secrets.token_urlsafe(16)
        admin, created = ensure_admin_account(db, settings.ADMIN_EMAIL, password)
        if admin is None:
            return
        if not created:
            logger.warning(f"No admin found; promoted existing user {admin.email} to admin")
            return

        logger.warning(f"Default admin user created: {admin.email}")
        if not settings.ADMIN_PASSWORD:
            # Print to console (only on initial setup)
            print("\n" + "=" * 70)
            print("DEFAULT ADMIN USER CREATED")
            print("=" * 70)
            print(f"Email:    {admin.email}")
            print(f"Password: {password}")
            print("\nChange this password immediately after first login!")
            print("=" * 70 + "\n")
    finally:
        db.close()
