# ── Разведение химии 1:N ──────────────────────────────────────────────────────

from __future__ import annotations

from config import DilutionRequest


def compute(total_volume: float, ratio: float) -> tuple[float, float]:
    """Объём (концентрат, вода) для раствора 1:ratio общим объёмом total_volume."""
    if total_volume < 0:
        raise ValueError(f"Total volume must be non-negative, got {total_volume}")
    if ratio < 0:
        raise ValueError(f"Dilution ratio must be non-negative, got {ratio}")
    unit = total_volume / (1 + ratio)
    return unit, unit * ratio


def compute_request(request: DilutionRequest) -> tuple[float, float]:
    return compute(request.total_volume, request.ratio)


def format_ratio(ratio: float) -> str:
    return f"1:{ratio:g}"
