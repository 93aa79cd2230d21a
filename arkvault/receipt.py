"""Cost receipts, confidential strings and wire helpers shared across the package."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, TypeVar

T = TypeVar("T")

# Costs are counted in atto tokens, held as unsigned 256-bit integers.
MAX_ATTOS = (1 << 256) - 1
_U64_MAX = (1 << 64) - 1
_NANOS_PER_SECOND = 1_000_000_000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class LineItem:
    """A single payment: its cost in atto tokens and when it was made."""

    cost: int
    timestamp: datetime


class Receipt:
    """An ordered record of the payments made during an operation."""

    def __init__(self) -> None:
        self._items: list[LineItem] = []

    def add(self, cost: int) -> None:
        """Record a payment of ``cost`` atto tokens made now."""
        if cost < 0 or cost > MAX_ATTOS:
            raise ValueError(f"cost out of range: {cost}")
        self._items.append(LineItem(cost=cost, timestamp=datetime.now(timezone.utc)))

    def total_cost(self) -> int:
        """Sum of all recorded costs; raises OverflowError past the token range."""
        total = 0
        for item in self._items:
            total += item.cost
            if total > MAX_ATTOS:
                raise OverflowError("attos overflowed")
        return total

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self._items)

    def __iadd__(self, other: Receipt) -> Receipt:
        if not isinstance(other, Receipt):
            return NotImplemented
        self._items.extend(other._items)
        if other is not self:
            other._items.clear()
        return self

    def __repr__(self) -> str:
        return f"Receipt(items={len(self._items)})"


class CostlyError(Exception):
    """An operation failed; carries the receipt of what was paid before it failed."""

    def __init__(self, error: BaseException, receipt: Receipt) -> None:
        super().__init__(str(error))
        self.error = error
        self.receipt = receipt


def with_receipt(func: Callable[[Receipt], T]) -> tuple[T, Receipt]:
    """Run ``func`` with a fresh receipt.

    Returns the result together with the receipt; a failure is raised as
    :class:`CostlyError` holding the receipt so far.
    """
    receipt = Receipt()
    try:
        result = func(receipt)
    except Exception as exc:
        raise CostlyError(exc, receipt) from exc
    return result, receipt


class ConfidentialString:
    """A string that never shows itself in reprs or logs."""

    __slots__ = ("_value",)

    def __init__(self, value: str) -> None:
        self._value = value

    def reveal(self) -> str:
        """Return the protected text."""
        return self._value

    def __repr__(self) -> str:
        return "<redacted>"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfidentialString):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)


def serialize_with_header(message: bytes, magic_number: bytes) -> bytes:
    """Prepend a fixed magic number to an encoded message."""
    return bytes(magic_number) + bytes(message)


def deserialize_with_header(data: bytes, magic_number: bytes) -> bytes:
    """Check and strip the magic number, returning the encoded message after it."""
    data = bytes(data)
    magic = bytes(magic_number)
    if len(data) < len(magic):
        raise ValueError(
            f"data too short ({len(data)} bytes) to contain header ({len(magic)} bytes)"
        )
    if data[: len(magic)] != magic:
        raise ValueError("invalid data format: header mismatch")
    return data[len(magic) :]


def timestamp_to_parts(moment: datetime) -> tuple[int, int]:
    """Split a moment into whole seconds since the epoch and non-negative nanoseconds.

    Naive datetimes are taken to be UTC.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    delta = moment - _EPOCH
    seconds = delta.days * 86_400 + delta.seconds
    return seconds, delta.microseconds * 1_000


def timestamp_from_parts(seconds: int, nanos: int) -> datetime:
    """Build a UTC datetime from epoch seconds and nanoseconds (truncated to microseconds)."""
    if not 0 <= nanos < _NANOS_PER_SECOND:
        raise ValueError("invalid timestamp")
    try:
        return _EPOCH + timedelta(seconds=seconds, microseconds=nanos // 1_000)
    except OverflowError:
        raise ValueError("invalid timestamp") from None


def uuid_to_pair(value: uuid.UUID) -> tuple[int, int]:
    """Split a UUID into its most and least significant 64-bit halves."""
    number = value.int
    return number >> 64, number & _U64_MAX


def uuid_from_pair(most_significant: int, least_significant: int) -> uuid.UUID:
    """Join two 64-bit halves back into a UUID."""
    for half in (most_significant, least_significant):
        if not 0 <= half <= _U64_MAX:
            raise ValueError(f"not a 64-bit unsigned value: {half}")
    return uuid.UUID(int=(most_significant << 64) | least_significant)