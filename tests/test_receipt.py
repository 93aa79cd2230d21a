import uuid
from datetime import datetime, timezone

import pytest

from arkvault.receipt import (
    MAX_ATTOS,
    ConfidentialString,
    CostlyError,
    LineItem,
    Receipt,
    deserialize_with_header,
    serialize_with_header,
    timestamp_from_parts,
    timestamp_to_parts,
    uuid_from_pair,
    uuid_to_pair,
    with_receipt,
)

MANIFEST_MAGIC = bytes(
    [0x61, 0x72, 0x6B, 0x5F, 0x6D, 0x61, 0x6E, 0x69, 0x66, 0x65, 0x73, 0x74, 0x5F, 0x76, 0x30, 0x30]
)


def test_empty_receipt():
    receipt = Receipt()
    assert len(receipt) == 0
    assert not receipt
    assert receipt.total_cost() == 0


def test_receipt_records_items_in_order():
    receipt = Receipt()
    receipt.add(5)
    receipt.add(7)
    items = list(receipt)
    assert [item.cost for item in items] == [5, 7]
    assert all(isinstance(item, LineItem) for item in items)
    assert items[0].timestamp <= items[1].timestamp
    assert items[0].timestamp.tzinfo is not None
    assert receipt.total_cost() == 12


def test_receipt_rejects_negative_cost():
    with pytest.raises(ValueError):
        Receipt().add(-1)


def test_total_cost_overflow():
    receipt = Receipt()
    receipt.add(MAX_ATTOS)
    receipt.add(1)
    with pytest.raises(OverflowError):
        receipt.total_cost()


def test_iadd_moves_items():
    first = Receipt()
    first.add(3)
    second = Receipt()
    second.add(4)
    second.add(6)
    first += second
    assert [item.cost for item in first] == [3, 4, 6]
    assert len(second) == 0


def test_with_receipt_success():
    def work(receipt):
        receipt.add(10)
        return "done"

    result, receipt = with_receipt(work)
    assert result == "done"
    assert receipt.total_cost() == 10


def test_with_receipt_failure_keeps_receipt():
    def work(receipt):
        receipt.add(9)
        raise RuntimeError("boom")

    with pytest.raises(CostlyError) as info:
        with_receipt(work)
    assert isinstance(info.value.error, RuntimeError)
    assert str(info.value) == "boom"
    assert info.value.receipt.total_cost() == 9


def test_confidential_string_is_redacted():
    phrase = ConfidentialString("secret")
    assert repr(phrase) == "<redacted>"
    assert str(phrase) == "<redacted>"
    assert "secret" not in f"{phrase!r} {phrase}"
    assert phrase.reveal() == "secret"
    assert phrase == ConfidentialString("secret")


def test_header_round_trip():
    payload = b"\x0a\x03abc"
    data = serialize_with_header(payload, MANIFEST_MAGIC)
    assert data.startswith(b"ark_manifest_v00")
    assert len(data) == len(MANIFEST_MAGIC) + len(payload)
    assert deserialize_with_header(data, MANIFEST_MAGIC) == payload


def test_header_too_short():
    with pytest.raises(ValueError, match="too short"):
        deserialize_with_header(b"ark", MANIFEST_MAGIC)


def test_header_mismatch():
    data = serialize_with_header(b"xyz", b"ark_key_ring_v00")
    with pytest.raises(ValueError, match="header mismatch"):
        deserialize_with_header(data, MANIFEST_MAGIC)


def test_timestamp_epoch():
    assert timestamp_to_parts(datetime(1970, 1, 1, tzinfo=timezone.utc)) == (0, 0)


def test_timestamp_round_trip():
    moment = datetime(2024, 5, 17, 12, 30, 45, 123456, tzinfo=timezone.utc)
    seconds, nanos = timestamp_to_parts(moment)
    assert 0 <= nanos < 1_000_000_000
    assert timestamp_from_parts(seconds, nanos) == moment


def test_timestamp_before_epoch_round_trip():
    moment = datetime(1960, 3, 1, 0, 0, 0, 500000, tzinfo=timezone.utc)
    seconds, nanos = timestamp_to_parts(moment)
    assert seconds < 0
    assert nanos >= 0
    assert timestamp_from_parts(seconds, nanos) == moment


def test_timestamp_invalid_nanos():
    with pytest.raises(ValueError, match="invalid timestamp"):
        timestamp_from_parts(0, 1_000_000_000)


def test_timestamp_out_of_range():
    with pytest.raises(ValueError, match="invalid timestamp"):
        timestamp_from_parts(10**15, 0)


def test_uuid_round_trip():
    value = uuid.uuid4()
    most, least = uuid_to_pair(value)
    assert 0 <= most < 2**64 and 0 <= least < 2**64
    assert uuid_from_pair(most, least) == value


def test_uuid_halves():
    assert uuid_to_pair(uuid.UUID(int=(1 << 64) | 2)) == (1, 2)
    assert uuid_from_pair(0, 0) == uuid.UUID(int=0)


def test_uuid_from_pair_rejects_large_half():
    with pytest.raises(ValueError):
        uuid_from_pair(2**64, 0)