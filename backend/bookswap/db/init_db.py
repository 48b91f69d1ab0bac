"""
Database initialization script.

    python -m bookswap.db.init_db
"""
from bookswap.db.session import init_db

if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    print("Database initialized successfully!")
