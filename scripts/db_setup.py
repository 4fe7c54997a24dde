#!/usr/bin/env python
"""
db_setup.py

Create the PostgreSQL role and database for the DevConnector API, then bring
the schema up to date by running the Alembic migrations.
It reads database credentials from backend/.env, the same file the API loads.

Required .env variables:
  DB_SUPERUSER_PASSWORD
  DB_USER
  DB_PASSWORD

Optional:
  DB_HOST, DB_PORT, DB_SUPERUSER, DB_NAME

Usage:
  python scripts/db_setup.py
"""
import os
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config
from dotenv import load_dotenv
import psycopg2
from psycopg2 import sql
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT

from devconnector.core.config import ENV_FILE

PROJECT_ROOT = Path(__file__).resolve().parent.parent
BACKEND_DIR = PROJECT_ROOT / 'backend'

load_dotenv(ENV_FILE)

DB_HOST = os.getenv('DB_HOST', 'localhost')
DB_PORT = os.getenv('DB_PORT', '5432')
SUPERUSER = os.getenv('DB_SUPERUSER', 'postgres')
SUPERUSER_PASSWORD = os.getenv('DB_SUPERUSER_PASSWORD')
DB_USER = os.getenv('DB_USER')
DB_PASSWORD = os.getenv('DB_PASSWORD')
DB_NAME = os.getenv('DB_NAME', 'devconnector')


def setup_database():
    """Create the application role and database if they do not exist yet."""
    print(f"\nConnecting to PostgreSQL at {DB_HOST}:{DB_PORT} as {SUPERUSER}...")
    try:
        conn = psycopg2.connect(
            dbname='postgres',
            user=SUPERUSER,
            password=SUPERUSER_PASSWORD,
            host=DB_HOST,
            port=DB_PORT
        )
    except psycopg2.Error as e:
        print(f"Error connecting to PostgreSQL: {e}")
        return False

    conn.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1 FROM pg_roles WHERE rolname = %s", (DB_USER,))
            if cur.fetchone():
                print(f"User '{DB_USER}' already exists.")
            else:
                cur.execute(
                    sql.SQL("CREATE USER {} WITH PASSWORD %s").format(sql.Identifier(DB_USER)),
                    (DB_PASSWORD,)
                )
                print(f"User '{DB_USER}' created.")

            cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (DB_NAME,))
            if cur.fetchone():
                print(f"Database '{DB_NAME}' already exists.")
            else:
                cur.execute(
                    sql.SQL("CREATE DATABASE {} WITH OWNER = {}").format(
                        sql.Identifier(DB_NAME), sql.Identifier(DB_USER)
                    )
                )
                print(f"Database '{DB_NAME}' created.")
        return True
    except psycopg2.Error as e:
        print(f"Error in database setup: {e}")
        return False
    finally:
        conn.close()


def run_migrations():
    """Apply every Alembic migration up to head."""
    print("\nRunning migrations...")
    config = Config(str(BACKEND_DIR / 'alembic.ini'))
    config.set_main_option('script_location', str(BACKEND_DIR / 'alembic'))
    command.upgrade(config, 'head')
    return True


if __name__ == '__main__':
    if not all([SUPERUSER_PASSWORD, DB_USER, DB_PASSWORD]):
        print("ERROR: Missing one of DB_SUPERUSER_PASSWORD, DB_USER, or DB_PASSWORD in .env")
        sys.exit(1)

    print("=== Setting up database and user ===")
    if not setup_database():
        print("\nFailed to setup database. Please check your PostgreSQL connection and credentials.")
        sys.exit(1)

    print("\n=== Applying migrations ===")
    run_migrations()
    print("\nDatabase setup completed successfully!")
