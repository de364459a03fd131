# ── Зонная система: подсветка тональных зон поверх кадра ──────────────────────

from __future__ import annotations

import cv2
import numpy as np

from config import ZONE_BANDS
from spot_meter import compute_luma


def _band_mask(luma: np.ndarray, low: float, high: float, inclusive: bool) -> np.ndarray:
    if inclusive:
        return (luma >= low) & (luma <= high)
    return (luma >= low) & (luma < high)


def zone_for_luma(luma: float) -> str | None:
    """Метка зоны для значения яркости; None — вне размеченных полос."""
    for low, high, inclusive, label, _ in ZONE_BANDS:
        if low <= luma < high or (inclusive and luma == high):
            return label
    return None


def classify_zones(buffer: np.ndarray) -> np.ndarray:
    """
    Перекрашивает пиксели по зонам. Возвращает НОВЫЙ буфер,
    входной (он же буфер замера) остаётся нетронутым.
    """
    luma = compute_luma(buffer)
    out = buffer[..., :3].copy()

    for low, high, inclusive, _, color in ZONE_BANDS:
        mask = _band_mask(luma, low, high, inclusive)
        if not mask.any():
            continue
        if color is None:
            # Зона V: зелёно-синий тон той же яркости
            tint = np.clip(luma[mask], 0, 255).astype(np.uint8)
            out[mask, 0] = 0
            out[mask, 1] = tint
            out[mask, 2] = tint
        else:
            out[mask] = color

    return out


def zone_histogram(buffer: np.ndarray) -> dict[str, float]:
    """Доля пикселей (0–1) в каждой размеченной зоне."""
    luma = compute_luma(buffer)
    total = luma.size
    shares = {}
    for low, high, inclusive, label, _ in ZONE_BANDS:
        count = int(_band_mask(luma, low, high, inclusive).sum())
        shares[label] = count / total if total else 0.0
    return shares


def render_overlay(zones: np.ndarray, width: int, height: int) -> np.ndarray:
    """Растягивает карту зон до размера исходного кадра (без сглаживания)."""
    if zones.shape[1] == width and zones.shape[0] == height:
        return zones
    return cv2.resize(zones, (width, height), interpolation=cv2.INTER_NEAREST)
