"""Tests for delivery_tool.models.delivery module."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from delivery_tool.api.exceptions import PersistenceError
from delivery_tool.models.delivery import Delivery, DeliveryKey, format_timestamp, parse_timestamp


class TestTimestamps:
    """Test persisted timestamp format."""

    def test_format_utc(self) -> None:
        value = datetime(2024, 3, 1, 12, 0, 5, 250000, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2024-03-01 12:00:05.250 GMTZ"

    def test_format_with_offset(self) -> None:
        value = datetime(2024, 3, 1, 8, 30, 0, tzinfo=timezone(timedelta(hours=-5, minutes=-30)))
        assert format_timestamp(value) == "2024-03-01 08:30:00.000 GMT-05:30"

    def test_parse_with_offset(self) -> None:
        value = parse_timestamp("2024-03-01 12:00:00.123 GMT+02:00")

        assert value.utcoffset() == timedelta(hours=2)
        assert value.microsecond == 123000
        assert value.hour == 12

    def test_parse_utc(self) -> None:
        value = parse_timestamp("2024-03-01 12:00:00.000 GMTZ")
        assert value == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)

    def test_parse_format_agree(self) -> None:
        text = "2023-12-31 23:59:59.999 GMT+01:00"
        assert format_timestamp(parse_timestamp(text)) == text

    @pytest.mark.parametrize("text", ["", "2024-03-01", "2024-03-01 12:00:00 GMTZ", "yesterday"])
    def test_parse_invalid(self, text: str) -> None:
        with pytest.raises(PersistenceError):
            parse_timestamp(text)


class TestDelivery:
    """Test Delivery identity and ordering."""

    def test_equal_by_name(self) -> None:
        first = Delivery("1.0", "alice")
        second = Delivery("1.0", "bob")

        assert first == second
        assert hash(first) == hash(second)
        assert Delivery("1.1") != first

    def test_sorted_newest_first(self) -> None:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        old = Delivery("old", created=base)
        new = Delivery("new", created=base + timedelta(days=1))

        assert sorted([old, new]) == [new, old]
        assert new < old

    def test_same_time_sorted_by_name(self) -> None:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        b = Delivery("b", created=base)
        a = Delivery("a", created=base)

        assert sorted([b, a]) == [a, b]

    def test_compare(self) -> None:
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        old = Delivery("old", created=base)
        new = Delivery("new", created=base + timedelta(hours=1))

        assert new.compare(old) < 0
        assert old.compare(new) > 0
        assert old.compare(Delivery("old")) == 0

    def test_created_truncated_to_millis(self) -> None:
        delivery = Delivery("1.0", created=datetime(2024, 1, 1, 0, 0, 0, 123789, tzinfo=timezone.utc))
        assert delivery.created.microsecond == 123000

    def test_naive_created_gets_local_zone(self) -> None:
        delivery = Delivery("1.0", created=datetime(2024, 1, 1, 10, 0))
        assert delivery.created.tzinfo is not None

    def test_dict_conversion(self) -> None:
        delivery = Delivery("1.0", "alice", datetime(2024, 1, 1, tzinfo=timezone.utc))

        data = delivery.to_dict()
        restored = Delivery.from_dict(data)

        assert data["created"] == "2024-01-01 00:00:00.000 GMTZ"
        assert restored.integrator == "alice"
        assert restored.created == delivery.created


class TestDeliveryKey:
    """Test DeliveryKey."""

    def test_of_delivery(self) -> None:
        key = DeliveryKey.of(Delivery("1.0"), "Version")

        assert key == DeliveryKey("1.0", "Version")
        assert str(key) == "1.0:Version"

    def test_frozen(self) -> None:
        key = DeliveryKey("1.0", "Version")
        with pytest.raises(AttributeError):
            key.delivery_name = "2.0"  # type: ignore[misc]
