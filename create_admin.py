"""
Script to create the first admin user
Run this script after running database migrations

Usage:
    python create_admin.py

Environment Variables (optional):
    ADMIN_EMAIL - Admin email address
    ADMIN_PASSWORD - Admin password (min 6 characters)
    ADMIN_FIRST_NAME - Admin first name
"""
import sys
from sqlalchemy.exc import OperationalError, ProgrammingError
from app.database import SessionLocal
from app.models.user import User, UserRole
from app.utils.security import get_password_hash
from app.config import settings


def create_admin():
    db = SessionLocal()

    try:
        try:
            existing_admin = db.query(User).filter(User.role == UserRole.ADMIN.value).first()
        except (OperationalError, ProgrammingError):
            print("[ERROR] Users table does not exist!")
            print("   Please run database migrations first:")
            print("   alembic upgrade head")
            return
        if existing_admin:
            print("[ERROR] Admin user already exists!")
            print(f"   Email: {existing_admin.email}")
            return

        email = settings.ADMIN_EMAIL.strip() or input("Enter admin email: ").strip()
        if not email:
            print("[ERROR] Email is required!")
            return
        if db.query(User).filter(User.email == email.lower()).first():
            print(f"[ERROR] A user with email {email} already exists!")
            return

        password = settings.ADMIN_PASSWORD.strip() or input("Enter admin password (min 6 characters): ").strip()
        if len(password) < 6:
            print("[ERROR] Password must be at least 6 characters!")
            return

        admin = User(
            first_name=settings.ADMIN_FIRST_NAME or "Admin",
            email=email.lower(),
            password_hash=get_password_hash(password),
            role=UserRole.ADMIN.value,
            is_active=True
        )
        db.add(admin)
        db.commit()
        db.refresh(admin)

        print("[SUCCESS] Admin user created successfully!")
        print(f"   Email: {admin.email}")
        print(f"   ID: {admin.id}")
        print("[TIP] You can now login at: POST /api/v1/auth/login")

    except Exception as e:
        db.rollback()
        print(f"[ERROR] Error creating admin: {e}")
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_admin()
