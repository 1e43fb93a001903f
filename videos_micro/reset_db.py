"""
Database Reset Script

Drops every table known to the models and recreates the schema using the
same engine the API uses. Uploaded files are left in place.
"""

import sys
from pathlib import Path

# Make the service packages importable when run as a script
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))


def reset_database():
    """Drop and recreate all tables"""
    try:
        print("Starting database reset...")

        from sqlalchemy import inspect
        from db.database import engine, Base, DATABASE_URL
        import models  # noqa: F401  registers every table on Base.metadata

        print(f"Connected to: {DATABASE_URL[:30]}...")

        existing = inspect(engine).get_table_names()
        print(f"Found {len(existing)} tables")

        print("Dropping all tables...")
        Base.metadata.drop_all(bind=engine)

        print("Recreating database structure...")
        Base.metadata.create_all(bind=engine)

        new_tables = inspect(engine).get_table_names()
        print(f"Database reset complete! Created {len(new_tables)} tables:")
        for table in sorted(new_tables):
            print(f"  {table}")
        return True

    except Exception as e:
        print(f"Reset failed: {e}")
        import traceback
        traceback.print_exc()
        return False


def main():
    print("DATABASE RESET TOOL")
    print("This will DELETE ALL DATA in your database!")
    print()

    response = input("Type 'RESET' to continue or anything else to cancel: ").strip()

    if response == 'RESET':
        if reset_database():
            print("\nSUCCESS! Your database is now empty.")
        else:
            print("\nFAILED! Something went wrong.")
            sys.exit(1)
    else:
        print("Cancelled. Database unchanged.")


if __name__ == "__main__":
    main()
