"""
Grant the admin role to an existing account.

    python promote_admin.py someone@example.com
"""
import argparse
import sys
import os

# Add the backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from bookswap.db.session import SessionLocal, init_db
from bookswap.models.user import User, UserRole
from bookswap.services.auth_service import normalize_email


def promote(email: str) -> bool:
    """Set role=admin for the user with this email. Returns False if no such user."""
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == normalize_email(email)).first()
        if not user:
            return False
        user.role = UserRole.ADMIN
        db.commit()
        return True
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("email", help="Email of the account to promote")
    args = parser.parse_args()

    init_db()
    if promote(args.email):
        print(f"{args.email} is now an admin")
    else:
        print(f"No user with email {args.email}")
        sys.exit(1)
