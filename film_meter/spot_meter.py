# ── Спот-метр: яркость центрального круга → EV ────────────────────────────────

from __future__ import annotations

import math

import numpy as np

from config import (
    BASELINE_EV,
    LUMA_PER_EV,
    NEUTRAL_LUMA,
    SMOOTHING,
    SPOT_RADIUS_FRACTION,
    EVEstimate,
    SpotRegion,
)

# Rec. 601
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])


def spot_region(width: int, height: int) -> SpotRegion:
    """Спот в центре кадра, радиус 0.15 от меньшей стороны."""
    return SpotRegion(
        center=(width / 2, height / 2),
        radius=min(width, height) * SPOT_RADIUS_FRACTION,
    )


def compute_luma(buffer: np.ndarray) -> np.ndarray:
    """Яркость каждого пикселя RGB-буфера (float64, 0–255)."""
    return buffer[..., :3].astype(np.float64) @ LUMA_WEIGHTS


def spot_mask(height: int, width: int, region: SpotRegion) -> np.ndarray:
    cx, cy = region.center
    ys, xs = np.ogrid[:height, :width]
    return (xs - cx) ** 2 + (ys - cy) ** 2 <= region.radius ** 2


def spot_luma(buffer: np.ndarray, region: SpotRegion) -> float:
    """Средняя яркость внутри спота; пустой спот → нейтральные 128."""
    h, w = buffer.shape[:2]
    mask = spot_mask(h, w, region)
    count = int(mask.sum())
    if count == 0:
        return NEUTRAL_LUMA
    return float(compute_luma(buffer)[mask].sum() / count)


def luma_to_ev(luma: float, calibration_offset: float = 0.0) -> float:
    """Мгновенный EV: 12 + (L - 128) / 30 + поправка."""
    return BASELINE_EV + (luma - NEUTRAL_LUMA) / LUMA_PER_EV + calibration_offset


def smooth(previous: float, raw: float) -> float:
    return previous * SMOOTHING + raw * (1 - SMOOTHING)


def sample(
    buffer: np.ndarray,
    region: SpotRegion,
    estimate: EVEstimate,
    locked: bool = False,
) -> EVEstimate:
    """
    Один замер. Обновляет estimate на месте и возвращает его же.
    При блокировке (AE-lock) пиксели не читаются, оценка не меняется.
    """
    if locked:
        return estimate

    raw = luma_to_ev(spot_luma(buffer, region), estimate.calibration_offset)
    if not math.isfinite(raw):
        raise ValueError(f"Non-finite EV reading: {raw}")

    estimate.raw = raw
    estimate.smoothed = smooth(estimate.smoothed, raw)
    return estimate
