import numpy as np
import pytest

from config import EVEstimate, SpotRegion
from spot_meter import (
    compute_luma,
    luma_to_ev,
    sample,
    smooth,
    spot_luma,
    spot_mask,
    spot_region,
)


def _make_buffer(value=128, width=10, height=10):
    return np.full((height, width, 3), value, dtype=np.uint8)


class TestSpotRegion:
    def test_center_and_radius(self):
        r = spot_region(40, 20)
        assert r.center == (20.0, 10.0)
        assert r.radius == pytest.approx(3.0)

    def test_mask_is_circle(self):
        mask = spot_mask(10, 10, spot_region(10, 10))
        # радиус 1.5 вокруг (5, 5) → квадрат 3×3
        assert mask.sum() == 9
        assert mask[4:7, 4:7].all()


class TestComputeLuma:
    def test_weights(self):
        buf = np.array([[[255, 0, 0], [0, 255, 0], [0, 0, 255]]], dtype=np.uint8)
        luma = compute_luma(buf)
        assert luma[0, 0] == pytest.approx(0.299 * 255)
        assert luma[0, 1] == pytest.approx(0.587 * 255)
        assert luma[0, 2] == pytest.approx(0.114 * 255)

    def test_gray(self):
        assert compute_luma(_make_buffer(200))[0, 0] == pytest.approx(200)


class TestSpotLuma:
    def test_only_center_counts(self):
        buf = _make_buffer(0)
        buf[4:7, 4:7] = 255
        assert spot_luma(buf, spot_region(10, 10)) == pytest.approx(255)

    def test_empty_spot_falls_back_to_neutral(self):
        buf = _make_buffer(0, width=1, height=1)
        assert spot_luma(buf, spot_region(1, 1)) == 128.0

    def test_custom_region(self):
        buf = _make_buffer(0)
        buf[0, 0] = 90
        assert spot_luma(buf, SpotRegion(center=(0, 0), radius=0.5)) == pytest.approx(90)


class TestLumaToEv:
    def test_mid_grey_is_baseline(self):
        assert luma_to_ev(128) == 12.0

    def test_one_stop_per_30(self):
        assert luma_to_ev(158) == pytest.approx(13.0)
        assert luma_to_ev(68) == pytest.approx(10.0)

    def test_offset(self):
        assert luma_to_ev(128, -1.5) == pytest.approx(10.5)


class TestSample:
    def test_smoothing_rule(self):
        assert smooth(10.0, 12.0) == pytest.approx(10.2)

    def test_updates_in_place(self):
        est = EVEstimate()
        result = sample(_make_buffer(128), spot_region(10, 10), est)
        assert result is est
        assert est.raw == pytest.approx(12.0)
        assert est.smoothed == pytest.approx(10.2)

    def test_converges_to_raw(self):
        est = EVEstimate()
        buf = _make_buffer(158)
        for _ in range(200):
            sample(buf, spot_region(10, 10), est)
        assert est.smoothed == pytest.approx(13.0, abs=1e-6)

    def test_calibration_applied(self):
        est = EVEstimate(calibration_offset=2.0)
        sample(_make_buffer(128), spot_region(10, 10), est)
        assert est.raw == pytest.approx(14.0)

    def test_locked_leaves_estimate_untouched(self):
        est = EVEstimate(raw=9.0, smoothed=9.5)
        for value in (0, 255, 128):
            sample(_make_buffer(value), spot_region(10, 10), est, locked=True)
        assert est.raw == 9.0
        assert est.smoothed == 9.5
