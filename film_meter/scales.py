# ── Стандартные шкалы: диафрагмы, выдержки, ISO ───────────────────────────────

from __future__ import annotations

import math
from typing import Sequence

APERTURE_SCALE = (
    1.0, 1.1, 1.2, 1.4, 1.6, 1.8, 2.0, 2.2, 2.5, 2.8, 3.2, 3.5, 4.0, 4.5,
    5.0, 5.6, 6.3, 7.1, 8.0, 9.0, 10.0, 11.0, 13.0, 14.0, 16.0, 18.0, 20.0, 22.0,
)

# Порядок объявления важен: при равенстве расстояний побеждает более ранний
SHUTTER_LABELS = (
    "1/8000", "1/4000", "1/2000", "1/1000", "1/500", "1/250", "1/125",
    "1/60", "1/30", "1/15", "1/8", "1/4", "1/2",
    "1", "2", "4", "8", "15", "30",
)

ISO_SCALE = (50, 100, 200, 400, 800, 1600, 3200)


def parse_shutter(label: str) -> float:
    """'1/125' → 0.008, '2' → 2.0, '2s' → 2.0."""
    text = label.strip().rstrip("s")
    if "/" in text:
        num, den = text.split("/", 1)
        if float(den) == 0:
            raise ValueError(f"Shutter {label!r} has a zero denominator")
        seconds = float(num) / float(den)
    else:
        seconds = float(text)
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"Shutter {label!r} must be a positive time")
    return seconds


SHUTTER_SCALE = tuple(parse_shutter(s) for s in SHUTTER_LABELS)


def nearest(scale: Sequence[float], target: float) -> float:
    """
    Ближайшее к target значение шкалы.
    При точном равенстве расстояний остаётся элемент, объявленный раньше.
    """
    # Далеко за краем шкалы расстояния до всех значений совпадают во float
    target = max(min(scale), min(max(scale), target))
    best = scale[0]
    for value in scale[1:]:
        if abs(value - target) < abs(best - target):
            best = value
    return best


def is_member(scale: Sequence[float], value: float) -> bool:
    return any(math.isclose(value, v, rel_tol=1e-9) for v in scale)


def require_member(scale: Sequence[float], value: float, name: str) -> float:
    """Значение не из шкалы — ошибка вызывающего кода, не округляем молча."""
    if not is_member(scale, value):
        raise ValueError(f"{name} {value!r} is not on the standard scale")
    return value


def format_shutter(seconds: float) -> str:
    """Подпись выдержки: '1/125' для долей секунды, '2s' от одной секунды."""
    for label, value in zip(SHUTTER_LABELS, SHUTTER_SCALE):
        if math.isclose(seconds, value, rel_tol=1e-9):
            return f"{label}s" if value >= 1 else label
    if seconds >= 1:
        return f"{seconds:g}s"
    return f"1/{round(1 / seconds)}"


def format_aperture(value: float) -> str:
    return f"f/{value:g}"
