import pytest
from datetime import datetime, timedelta, timezone

from cashbook.domain.timestamps import ensure_utc, from_storage, to_storage

@pytest.mark.unit
class TestStorageFormat:

    def test_round_trip(self):
        value = datetime(2024, 1, 15, 10, 30, 5, 123456, tzinfo=timezone.utc)
        assert to_storage(value) == "2024-01-15T10:30:05.123456Z"
        assert from_storage(to_storage(value)) == value

    def test_offset_is_converted_to_utc(self):
        value = datetime(2024, 1, 15, 17, 30, tzinfo=timezone(timedelta(hours=7)))
        assert to_storage(value) == "2024-01-15T10:30:00.000000Z"

    @pytest.mark.parametrize("year", [1, 42, 999])
    def test_early_years_are_zero_padded(self, year):
        value = datetime(year, 6, 1, tzinfo=timezone.utc)

        text = to_storage(value)

        assert text == f"{year:04d}-06-01T00:00:00.000000Z"
        assert from_storage(text) == value

    def test_text_order_matches_time_order(self):
        values = [
            datetime(999, 6, 1, tzinfo=timezone.utc),
            datetime(1000, 1, 1, tzinfo=timezone.utc),
            datetime(2024, 1, 15, tzinfo=timezone.utc),
        ]
        assert sorted(to_storage(v) for v in values) == [to_storage(v) for v in values]

    def test_naive_is_taken_as_utc(self):
        assert ensure_utc(datetime(2024, 1, 15)) == datetime(2024, 1, 15, tzinfo=timezone.utc)

    def test_conversion_past_datetime_range_raises(self):
        value = datetime(1, 1, 1, tzinfo=timezone(timedelta(hours=1)))
        with pytest.raises(OverflowError):
            ensure_utc(value)
