# ── Источники кадров: камера (OpenCV) и неподвижное изображение (Pillow) ──────

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

from config import MAX_EMPTY_READS
from sampler import Frame

logger = logging.getLogger(__name__)


class FrameSourceError(RuntimeError):
    """Источник не может отдавать кадры (нет доступа, устройство пропало)."""


class FrameNotReady(Exception):
    """Кадр ещё не готов — повторить в следующий тик, это не ошибка."""


class VideoCaptureSource:
    """Живое видео через cv2.VideoCapture, кадры отдаются в RGB."""

    def __init__(self, device: int | str = 0, max_empty_reads: int = MAX_EMPTY_READS):
        self.device = device
        self.max_empty_reads = max_empty_reads
        self._empty_reads = 0
        self._capture = cv2.VideoCapture(device)
        if not self._capture.isOpened():
            self._capture.release()
            raise FrameSourceError(f"Cannot open video device {device!r}")
        logger.info("Video source %r opened", device)

    def read(self) -> Frame:
        if self._capture is None:
            raise FrameSourceError("Video source already released")
        ok, bgr = self._capture.read()
        if not ok or bgr is None:
            self._empty_reads += 1
            if self._empty_reads >= self.max_empty_reads:
                raise FrameSourceError(
                    f"No frames from {self.device!r} after {self._empty_reads} attempts"
                )
            raise FrameNotReady()
        self._empty_reads = 0
        return Frame(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB))

    def release(self):
        if self._capture is not None:
            self._capture.release()
            self._capture = None
            logger.info("Video source %r released", self.device)


class StillImageSource:
    """Один и тот же кадр из файла на каждый запрос — для замера по фото."""

    def __init__(self, path: Path):
        self.path = Path(path)
        try:
            with Image.open(self.path) as img:
                self._pixels = np.asarray(img.convert("RGB"), dtype=np.uint8)
        except (OSError, ValueError) as e:
            raise FrameSourceError(f"Cannot read image {self.path}: {e}") from e

    def read(self) -> Frame:
        return Frame(self._pixels)

    def release(self):
        pass
