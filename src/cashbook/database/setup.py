"""
Database initialization: schema plus seed categories.
"""
import sqlite3
from typing import Any, Dict, List, Optional

from cashbook.config.settings import ConfigLoader
from cashbook.database.connection import DatabaseManager, execute_schema, schema_version
from cashbook.domain.enums import TransactionType
from cashbook.domain.models import Category
from cashbook.logger import get_logger
from cashbook.repositories.sqlite_category_repository import SQLiteCategoryRepository

logger = get_logger(__name__)

def initialize_database(
    db_manager: DatabaseManager,
    categories: Optional[List[Dict[str, Any]]] = None,
) -> Optional[sqlite3.Row]:
    """
    Create the schema and seed reference categories. Safe to run repeatedly.

    Args:
        db_manager: Target database
        categories: Optional seed list. If None, loads 'categories.json'.

    Returns:
        The latest schema_version row
    """
    conn = db_manager.get_connection()
    execute_schema(conn)

    if categories is None:
        categories = ConfigLoader.load_categories()

    repository = SQLiteCategoryRepository(db_manager)
    for entry in categories:
        repository.save(Category(
            id=entry["id"],
            name=entry["name"],
            type=TransactionType(entry["type"]),
        ))

    logger.info("Seeded %d categories", len(categories))
    return schema_version(conn)
