# ── Экспопара: EV + ISO + фиксированный член → второй член пары ───────────────

from __future__ import annotations

import math

from config import ExposureSettings, PriorityMode
from scales import (
    APERTURE_SCALE,
    ISO_SCALE,
    SHUTTER_SCALE,
    format_aperture,
    format_shutter,
    nearest,
    require_member,
)


# За пределами ±1000 EV 2**ev переполняет float; результат всё равно край шкалы
EV_LIMIT = 1000.0


def _pow2(ev: float) -> float:
    return 2.0 ** max(-EV_LIMIT, min(EV_LIMIT, ev))


def target_shutter(ev: float, iso: float, aperture: float) -> float:
    """t = N² · 100 / (ISO · 2^EV)"""
    return (aperture ** 2 * 100) / (iso * _pow2(ev))


def target_aperture(ev: float, iso: float, seconds: float) -> float:
    """N = sqrt(t · ISO · 2^EV / 100)"""
    return math.sqrt((seconds * iso * _pow2(ev)) / 100)


def exposure_value(aperture: float, seconds: float, iso: float = 100) -> float:
    """EV = log2(N²/t) + log2(ISO/100). Обратная формула к resolve()."""
    if aperture <= 0 or seconds <= 0 or iso <= 0:
        raise ValueError("Aperture, shutter and ISO must be positive")
    return math.log2(aperture ** 2 / seconds) + math.log2(iso / 100)


def resolve(ev: float, iso: int, mode: PriorityMode, fixed_value: float) -> float:
    """
    Второй член экспопары, привязанный к ближайшему значению шкалы.
    Av: fixed_value — диафрагма, результат — выдержка (сек).
    Tv: fixed_value — выдержка (сек), результат — диафрагма.
    """
    if not math.isfinite(ev):
        raise ValueError(f"EV must be finite, got {ev}")
    require_member(ISO_SCALE, iso, "ISO")

    mode = PriorityMode(mode)
    if mode is PriorityMode.APERTURE_FIXED:
        require_member(APERTURE_SCALE, fixed_value, "Aperture")
        return nearest(SHUTTER_SCALE, target_shutter(ev, iso, fixed_value))

    require_member(SHUTTER_SCALE, fixed_value, "Shutter")
    return nearest(APERTURE_SCALE, target_aperture(ev, iso, fixed_value))


def resolve_settings(ev: float, settings: ExposureSettings) -> tuple[float, str]:
    """Результат для табло: (значение, подпись)."""
    value = resolve(ev, settings.iso, settings.priority_mode, settings.fixed_value)
    if settings.priority_mode is PriorityMode.APERTURE_FIXED:
        return value, format_shutter(value)
    return value, format_aperture(value)
