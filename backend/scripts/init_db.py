#!/usr/bin/env python
"""
Database Initialization Script

Creates the Podsite episode tables in the configured database.
Run this script to set up a fresh database.

Usage:
    python scripts/init_db.py
"""
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from podsite.config import DATABASE_URL
from podsite.database import create_database_engine, create_tables
from podsite.models.base import Base


def main() -> None:
    """
    Initialize the database.

    Creates all tables defined in the models.
    """
    print("Initializing Podsite database...")
    print(f"Database URL: {DATABASE_URL}")

    try:
        engine = create_database_engine()
        print("Database engine created.")

        # Create all tables
        create_tables(engine)
        print("All database tables created successfully.")

        # List created tables
        print(f"\nCreated {len(Base.metadata.tables)} tables:")
        for table_name in sorted(Base.metadata.tables.keys()):
            print(f"  - {table_name}")

        print("\nDatabase initialization complete!")

    except Exception as e:
        print(f"Error initializing database: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
