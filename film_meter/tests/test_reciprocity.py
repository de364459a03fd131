import pytest

from reciprocity import (
    FILM_STOCKS,
    compensate,
    compensate_for,
    compensation_delta,
    find_stock,
    format_duration,
)


class TestCompensate:
    def test_one_second_is_identity(self):
        for p in (0.5, 1.0, 1.05, 1.35, 1.4, 3.0):
            assert compensate(1, p) == 1

    def test_portra_thirty_seconds(self):
        assert compensate(30, 1.35) == pytest.approx(98.65, abs=0.01)

    def test_monotonic_above_one_second(self):
        times = [compensate(t, 1.31) for t in (1, 2, 10, 60, 120)]
        assert times == sorted(times)
        assert compensate(30, 1.40) > compensate(30, 1.05)

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            compensate(0, 1.3)
        with pytest.raises(ValueError):
            compensate(-5, 1.3)
        with pytest.raises(ValueError):
            compensate(10, 0)

    def test_delta(self):
        assert compensation_delta(1, 1.35) == 0
        assert compensation_delta(30, 1.35) == pytest.approx(68.65, abs=0.01)

    def test_compensate_for_stock(self):
        acros = find_stock("Fuji Acros 100 II")
        assert compensate_for(10, acros) == pytest.approx(10 ** 1.05)


class TestFindStock:
    def test_catalogue(self):
        assert [s.exponent for s in FILM_STOCKS] == [1.35, 1.30, 1.05, 1.31, 1.40]

    def test_exact_and_partial(self):
        assert find_stock("kodak portra 400").exponent == 1.35
        assert find_stock("hp5").name == "Ilford HP5 Plus"

    def test_ambiguous_or_unknown(self):
        with pytest.raises(ValueError):
            find_stock("kodak")
        with pytest.raises(ValueError):
            find_stock("Velvia 50")


class TestFormatDuration:
    def test_under_minute(self):
        assert format_duration(12.345) == "12.3s"

    def test_minutes(self):
        assert format_duration(98.65) == "1m 39s"
        assert format_duration(600) == "10m 0s"

    def test_rounding_carries_into_minute(self):
        assert format_duration(119.7) == "2m 0s"
