from .database import Database, get_database
from .migrations import init_db
from .models import PersistedState
from .utils import transaction_scope

__all__ = [
    "Database",
    "get_database",
    "init_db",
    "PersistedState",
    "transaction_scope",
]
