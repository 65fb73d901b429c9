import os
import sys
from sqlmodel import Session, select

# Add current directory to path
sys.path.append(os.getcwd())

from casino_crm.db.session import engine, init_db
from casino_crm.models.user import User
from casino_crm.core.security import get_password_hash


def create_initial_user(email: str, password: str, full_name: str = "CRM Admin"):
    print("--- Initial User Creation ---")
    init_db()

    with Session(engine) as session:
        # Check if user already exists
        user = session.exec(select(User).where(User.email == email)).first()
        if user:
            print(f"User with email {email} already exists.")
            return

        print(f"Creating user {email}...")
        session.add(User(
            email=email,
            password=get_password_hash(password),
            full_name=full_name,
        ))
        session.commit()
        print("Initial user created successfully!")
        print(f"Email: {email}")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python scripts/create_first_user.py <email> <password> [full name]")
        sys.exit(1)
    create_initial_user(*sys.argv[1:4])
