#!/usr/bin/env python3
"""
Initialize the cashbook database.

Run this script to create the database schema and seed the default
categories at the configured database path.
"""
from cashbook.config.settings import ConfigLoader
from cashbook.database.connection import DatabaseConfig, DatabaseManager
from cashbook.database.setup import initialize_database

def main():
    """Initialize the database."""

    settings = ConfigLoader.load_settings()
    config = DatabaseConfig(settings.database_path)
    print(f"Initializing database at: {config.db_path}")

    with DatabaseManager(config) as db:
        row = initialize_database(db)

        if row:
            print(f"✓ Database initialized successfully!")
            print(f"  Schema version: {row['version']}")
            print(f"  Description: {row['description']}")
        else:
            print("✗ Database initialization may have failed")

if __name__ == "__main__":
    main()
