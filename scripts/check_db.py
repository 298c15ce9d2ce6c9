"""Check the database connection and schema."""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Load .env file
from dotenv import load_dotenv

load_dotenv()

from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from bizzleap.core.config import settings
from bizzleap.db.session import Database

print("=" * 60)
print("Testing Database Connection")
print("=" * 60)
print(f"Database URL: {settings.DATABASE_URL.split('@')[-1]}")  # Hide password
print()

database = Database(settings.DATABASE_URL, echo=False)
try:
    database.open()
    print("✓ Connection successful!")

    tables = set(inspect(database.engine).get_table_names())
    for table in ("users", "user_sessions"):
        if table in tables:
            print(f"✓ '{table}' table exists")
        else:
            print(f"✗ '{table}' table does not exist - run migration")

except SQLAlchemyError as e:
    print(f"✗ Connection failed: {e}")
    sys.exit(1)
finally:
    database.close()

print("=" * 60)
