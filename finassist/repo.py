import json

from .db import kv_get, kv_set
from .logging_setup import get_logger
from .models import Transaction

logger = get_logger(__name__)


def load_transactions(db_path, key: str) -> list[Transaction]:
    raw = kv_get(db_path, key)
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        logger.warning("stored ledger under %r is not valid JSON; starting empty", key)
        return []
    if not isinstance(data, list):
        logger.warning("stored ledger under %r is not a list; starting empty", key)
        return []
    try:
        return [Transaction.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError, OverflowError):
        logger.warning("stored ledger under %r has malformed entries; starting empty", key)
        return []


def save_transactions(db_path, key: str, transactions) -> None:
    payload = json.dumps(
        [txn.to_dict() for txn in transactions], ensure_ascii=False
    )
    kv_set(db_path, key, payload)
