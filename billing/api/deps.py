# billing/api/deps.py

from functools import lru_cache

from billing.db.engine import get_engine
from billing.db.storage import KeyValueStore
from billing.service import BillingService


@lru_cache
def get_service() -> BillingService:
    """One service (and one copy of the in-memory state) per process."""
    return BillingService(KeyValueStore(get_engine()))
