import time
from datetime import date

from .db import init_db
from .logging_setup import get_logger
from .logic import (
    normalize_category,
    parse_amount,
    validate_description,
    validate_kind,
)
from .models import Transaction
from .repo import load_transactions, save_transactions
from .settings import Settings

logger = get_logger(__name__)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def format_display_date(day: date) -> str:
    return day.strftime("%d/%m/%Y")


class Ledger:
    """Newest-first list of transactions, persisted after every mutation."""

    def __init__(self, settings: Settings, transactions=()):
        self._settings = settings
        self._transactions = list(transactions)
        self._last_id = max((t.id for t in self._transactions), default=0)

    @classmethod
    def load(cls, settings: Settings) -> "Ledger":
        init_db(settings)
        transactions = load_transactions(settings.db_path, settings.storage_key)
        logger.info("loaded %d transactions", len(transactions))
        return cls(settings, transactions)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def recent(self, limit: int = 10) -> tuple[Transaction, ...]:
        return tuple(self._transactions[:limit])

    def _next_id(self, now_ms: int) -> int:
        return max(now_ms, self._last_id + 1)

    def add(self, kind, amount, description, category=None, *, now_ms=None, today=None):
        valid_kind = validate_kind(kind)
        valid_amount = parse_amount(amount)
        valid_description = validate_description(description)

        created_at = _now_ms() if now_ms is None else now_ms
        txn = Transaction(
            id=self._next_id(created_at),
            kind=valid_kind,
            amount=valid_amount,
            description=valid_description,
            category=normalize_category(category),
            date_display=format_display_date(today or date.today()),
            created_at=created_at,
        )
        updated = [txn, *self._transactions]
        self._save(updated)
        self._transactions = updated
        self._last_id = txn.id
        logger.info("added %s transaction %d (%.2f)", txn.kind, txn.id, txn.amount)
        return txn

    def clear(self) -> None:
        self._save([])
        self._transactions = []
        logger.info("ledger cleared")

    def persist(self) -> None:
        self._save(self._transactions)

    def _save(self, transactions) -> None:
        # memory only changes after storage accepted the write
        save_transactions(
            self._settings.db_path, self._settings.storage_key, transactions
        )
