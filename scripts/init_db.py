import os
import sys
from sqlmodel import Session, select

# Add current directory to path so we can import casino_crm
sys.path.append(os.getcwd())

from casino_crm.db.session import engine, init_db
from casino_crm.models import Client


def verify_database():
    print("--- Database Initialisation ---")
    try:
        print("Creating tables...")
        init_db()
        print("Table creation/verification successful.")

        with Session(engine) as session:
            session.exec(select(Client).limit(1)).first()
            print("Database connection test: SUCCESS")

    except Exception as e:
        print("Database connection test: FAILED")
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    verify_database()
