"""
Transaction data models and type definitions.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Marketplace transaction direction."""
    PURCHASE = "purchase"
    SALE = "sale"


class DiscardCategory(str, Enum):
    """Why a row was excluded from an import."""
    MISSING_REQUIRED_FIELD = "missing-required-field"
    UNPARSEABLE_DATE = "unparseable-date"
    UNPARSEABLE_PRICE = "unparseable-price"
    INVALID_TYPE = "invalid-type"


@dataclass(frozen=True)
class ParsedDate:
    """
    Result of parsing a single date token.

    Exactly one of `resolved` / `needs_year_inference` holds, unless parsing
    failed entirely (both unset).

    Attributes:
        resolved: Fully resolved datetime, if the token carried a year
        has_time_component: Whether a clock time was present in the token
        needs_year_inference: Whether the year must be inferred from neighbours
        month_day: (month 0-11, day 1-31), only set when needs_year_inference
        time_of_day: Clock time found next to a year-less date, re-applied
            once the year is inferred
    """
    resolved: Optional[datetime] = None
    has_time_component: bool = False
    needs_year_inference: bool = False
    month_day: Optional[tuple[int, int]] = None
    time_of_day: Optional[time] = None

    @classmethod
    def failed(cls) -> 'ParsedDate':
        """Terminal parse failure."""
        return cls()

    @property
    def is_failure(self) -> bool:
        """Whether the token could not be parsed at all."""
        return self.resolved is None and not self.needs_year_inference


@dataclass(frozen=True)
class CanonicalTransaction:
    """
    A validated marketplace transaction.

    Attributes:
        item: Item name (trimmed, non-empty)
        game: Game name (trimmed, non-empty)
        date: Fully resolved timestamp
        price_cents: Price in minor currency units (>= 0)
        type: Purchase or sale
    """
    item: str
    game: str
    date: datetime
    price_cents: int
    type: TransactionType

    def __post_init__(self):
        """Validate transaction data."""
        if not self.item or not self.item.strip():
            raise ValueError("Item cannot be empty")
        if not self.game or not self.game.strip():
            raise ValueError("Game cannot be empty")
        if not isinstance(self.date, datetime):
            raise ValueError("Date must be a datetime")
        if isinstance(self.price_cents, bool) or not isinstance(self.price_cents, int):
            raise ValueError("Price must be an integer number of cents")
        if self.price_cents < 0:
            raise ValueError("Price cannot be negative")
        if not isinstance(self.type, TransactionType):
            raise ValueError(f"Invalid transaction type: {self.type}")

    @property
    def date_iso(self) -> str:
        """Date serialized as ISO 8601."""
        return self.date.isoformat(timespec='seconds')

    def to_dict(self) -> dict:
        """Convert transaction to dictionary."""
        return {
            'item': self.item,
            'game': self.game,
            'date': self.date_iso,
            'price_cents': self.price_cents,
            'type': self.type.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CanonicalTransaction':
        """Create CanonicalTransaction from dictionary."""
        return cls(
            item=data['item'],
            game=data['game'],
            date=datetime.fromisoformat(data['date']),
            price_cents=int(data['price_cents']),
            type=TransactionType(data['type']),
        )


@dataclass(frozen=True)
class StoredTransaction:
    """A transaction as persisted, with storage-assigned fields."""
    id: str
    transaction: CanonicalTransaction
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        """Convert stored transaction to a flat dictionary."""
        return {
            'id': self.id,
            **self.transaction.to_dict(),
            'created_at': self.created_at.isoformat(timespec='seconds'),
            'updated_at': self.updated_at.isoformat(timespec='seconds'),
        }


@dataclass(frozen=True)
class DiscardReason:
    """A row excluded from an import, with its 1-based row index."""
    row_index: int
    reason: DiscardCategory
    detail: str = ""

    def to_dict(self) -> dict:
        return {
            'row_index': self.row_index,
            'reason': self.reason.value,
            'detail': self.detail,
        }


@dataclass
class ImportResult:
    """Validated records plus the diagnostics for every skipped row."""
    records: list[CanonicalTransaction] = field(default_factory=list)
    discards: list[DiscardReason] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.records)

    @property
    def skipped_count(self) -> int:
        return len(self.discards)

    def discard_counts(self) -> dict[str, int]:
        """Number of skipped rows per discard category."""
        return dict(Counter(d.reason.value for d in self.discards))

    def summary_message(self) -> str:
        """Human readable outcome, e.g. "3 imported, 1 skipped (reasons: invalid-type: 1)"."""
        message = f"{self.imported_count} imported, {self.skipped_count} skipped"
        counts = self.discard_counts()
        if counts:
            reasons = ", ".join(f"{reason}: {count}" for reason, count in sorted(counts.items()))
            message += f" (reasons: {reasons})"
        return message


@dataclass(frozen=True)
class TransactionTotals:
    """Summary totals in cents: sales are gains, purchases are spending."""
    gains: int = 0
    spent: int = 0

    @property
    def net(self) -> int:
        return self.gains - self.spent

    def to_dict(self) -> dict:
        return {'gains': self.gains, 'spent': self.spent, 'net': self.net}


@dataclass
class TransactionFilters:
    """
    Filter criteria for stored transactions.

    Attributes:
        search_term: Case-insensitive substring of the item name
        game: Exact game name
        type: Exact transaction type
        min_price: Lower price bound in euros (inclusive)
        max_price: Upper price bound in euros (inclusive)
        start_date: First day included
        end_date: Last day included
    """
    search_term: str = ""
    game: Optional[str] = None
    type: Optional[TransactionType] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def has_active_filters(self) -> bool:
        return (
            self.search_term != ""
            or self.game is not None
            or self.type is not None
            or self.min_price is not None
            or self.max_price is not None
            or self.start_date is not None
            or self.end_date is not None
        )
