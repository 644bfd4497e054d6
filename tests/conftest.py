import pytest
from datetime import datetime, timezone

from cashbook.database.connection import DatabaseConfig, DatabaseManager
from cashbook.database.setup import initialize_database
from cashbook.domain.enums import TransactionType, UserRole
from cashbook.domain.models import Category, Principal, Profile
from cashbook.repositories.sqlite_profile_repository import SQLiteProfileRepository

from tests.ids import ADMIN_ID, FOOD_ID, OTHER_USER_ID, SALARY_ID, USER_ID

@pytest.fixture
def food() -> Category:
    return Category(id=FOOD_ID, name="Food", type=TransactionType.EXPENSE)

@pytest.fixture
def salary() -> Category:
    return Category(id=SALARY_ID, name="Salary", type=TransactionType.INCOME)

@pytest.fixture
def user() -> Principal:
    return Principal(user_id=USER_ID)

@pytest.fixture
def other_user() -> Principal:
    return Principal(user_id=OTHER_USER_ID)

@pytest.fixture
def admin() -> Principal:
    return Principal(user_id=ADMIN_ID, role=UserRole.ADMIN)

@pytest.fixture
def valid_payload() -> dict:
    """Raw input that passes every validation rule"""
    return {
        "type": "expense",
        "amount": 10000,
        "category_id": FOOD_ID,
        "note": "Test transaction",
        "occurred_at": "2024-01-15T10:30:00.000Z",
    }

@pytest.fixture
def test_db(tmp_path):
    """
    Create a real test database with the schema, default categories and
    three profiles.

    Uses pytest's tmp_path so the file is removed after each test.
    """
    db_manager = DatabaseManager(DatabaseConfig(tmp_path / "test.db"))
    initialize_database(db_manager)

    created = datetime(2025, 1, 1, tzinfo=timezone.utc)
    profiles = SQLiteProfileRepository(db_manager)
    for profile in (
        Profile(USER_ID, "user@example.com", UserRole.USER, created),
        Profile(OTHER_USER_ID, "other@example.com", UserRole.USER, created),
        Profile(ADMIN_ID, "admin@example.com", UserRole.ADMIN, created),
    ):
        profiles.save(profile)

    yield db_manager

    db_manager.close()
