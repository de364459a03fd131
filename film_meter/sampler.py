# ── Кадры и уменьшение разрешения ─────────────────────────────────────────────

from __future__ import annotations

import time
from dataclasses import dataclass, field

import cv2
import numpy as np

from config import DOWNSAMPLE_FACTOR


@dataclass
class Frame:
    """Кадр с источника: RGB uint8 (h, w, 3). Живёт один тик."""
    pixels: np.ndarray
    timestamp: float = field(default_factory=time.monotonic)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @classmethod
    def from_bytes(cls, data: bytes, width: int, height: int,
                   timestamp: float | None = None) -> Frame:
        """Собирает кадр из чередующихся RGB-байтов."""
        expected = width * height * 3
        if len(data) != expected:
            raise ValueError(f"Expected {expected} RGB bytes for {width}x{height}, got {len(data)}")
        pixels = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 3)
        if timestamp is None:
            return cls(pixels)
        return cls(pixels, timestamp)


def working_size(width: int, height: int) -> tuple[int, int]:
    """Размер рабочего буфера (w, h): четверть исходного, минимум 1 пиксель."""
    return max(1, width // DOWNSAMPLE_FACTOR), max(1, height // DOWNSAMPLE_FACTOR)


def downsample(frame: Frame) -> np.ndarray:
    """Новый буфер в 1/4 разрешения. Исходный кадр не меняется и не хранится."""
    w, h = working_size(frame.width, frame.height)
    return cv2.resize(frame.pixels, (w, h), interpolation=cv2.INTER_AREA)
