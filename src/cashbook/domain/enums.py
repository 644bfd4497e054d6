from enum import Enum

class TransactionType(Enum):
    """Represents whether money is coming in or out"""
    INCOME = "income" # in
    EXPENSE = "expense" # out

class UserRole(Enum):
    """Role of an authenticated user"""
    USER = "user"
    ADMIN = "admin"

class AuditAction(Enum):
    """Write operations recorded in the audit log"""
    INSERT = "INSERT"
    DELETE = "DELETE"
