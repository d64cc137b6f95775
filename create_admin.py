"""
Script to bootstrap a fresh database with the first admin account.

Self-registration only ever creates 'user' accounts, so the first admin has to
be created here. It also makes sure the ability catalog exists (the initial
migration seeds it too). Grants an admin has revoked stay revoked, so the
script is safe to re-run when adding more admins.

Run this script from the project root after "alembic upgrade head":
    python create_admin.py
"""

import getpass
import os
import sys

# Add app to Python path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.core.database import SessionLocal, init_db
from app.core.errors import ConflictError
from app.core.permissions import Role
from app.crud import permission as permission_crud
from app.crud import user as user_crud


def create_admin():
    """Seed permissions and create an admin user from prompted credentials."""
    init_db()
    db = SessionLocal()

    try:
        seeded = permission_crud.seed_defaults(db)
        print(f"Ability catalog ready ({seeded} rows added)")

        email = input("Admin email: ").strip().lower()
        name = input("Admin name (optional): ").strip() or None
        password = getpass.getpass("Password (8-72 characters): ")
        if not 8 <= len(password) <= 72:
            print("Password must be 8-72 characters. Nothing was created.")
            return

        try:
            user = user_crud.create(db, email=email, password=password, name=name, role=Role.ADMIN)
        except ConflictError:
            print(f"A user with email {email} already exists. Promote it from the admin UI instead.")
            return

        print(f"\n✓ Admin created: {user.email} (ID: {user.id})")

    except Exception as e:
        db.rollback()
        print(f"\n✗ Error during setup: {e}")
        print("Database changes have been rolled back.")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    create_admin()
