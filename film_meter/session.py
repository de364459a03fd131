# ── Сессия экспонометра: цикл тиков Idle / Sampling / Locked ──────────────────

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from config import (
    TICK_INTERVAL,
    EVEstimate,
    ExposureSettings,
    MeterState,
    PriorityMode,
    validate_calibration,
)
from exposure import resolve_settings
from sampler import downsample
from scales import APERTURE_SCALE, ISO_SCALE, SHUTTER_SCALE, parse_shutter, require_member
from sources import FrameNotReady, FrameSourceError
from spot_meter import sample, spot_region
from zones import classify_zones, render_overlay

logger = logging.getLogger(__name__)


@dataclass
class MeterReading:
    """То, что уходит на табло каждый тик."""
    ev: float                             # сглаженный EV
    raw_ev: float                         # EV последнего замера
    value: float                          # вычисленная выдержка (сек) или диафрагма
    label: str                            # '1/125' или 'f/5.6'
    state: MeterState
    overlay: np.ndarray | None = None     # карта зон в размере исходного кадра
    timestamp: float = field(default_factory=time.monotonic)


class MeterSession:
    """
    Владеет оценкой EV, блокировкой и настройками экспозиции.
    Всё меняется синхронно внутри tick(); снаружи — только сеттеры ниже,
    каждый пишет одно поле и виден со следующего тика.
    """

    def __init__(
        self,
        source,
        settings: ExposureSettings | None = None,
        on_reading: Callable[[MeterReading], None] | None = None,
        tick_interval: float = TICK_INTERVAL,
        show_zones: bool = False,
    ):
        self.source = source
        self.settings = settings or ExposureSettings()
        self.on_reading = on_reading
        self.tick_interval = tick_interval
        self.show_zones = show_zones

        self.estimate = EVEstimate()
        self.locked = False
        self.state = MeterState.IDLE
        self.ticks = 0

        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    # ── Управление пользователем ──────────────────────────────────────────────

    def toggle_lock(self) -> bool:
        """AE-lock: замер замораживается до повторного нажатия."""
        self.locked = not self.locked
        if self.state is not MeterState.IDLE:
            self.state = MeterState.LOCKED if self.locked else MeterState.SAMPLING
        logger.info("Exposure lock %s at EV %.2f", "on" if self.locked else "off",
                    self.estimate.smoothed)
        return self.locked

    def toggle_zones(self) -> bool:
        self.show_zones = not self.show_zones
        return self.show_zones

    def set_calibration_offset(self, offset: float):
        self.estimate.calibration_offset = validate_calibration(offset)

    def select_iso(self, iso: int):
        self.settings.iso = require_member(ISO_SCALE, iso, "ISO")

    def select_mode(self, mode: PriorityMode | str):
        self.settings.priority_mode = PriorityMode(mode)

    def select_aperture(self, aperture: float):
        self.settings.fixed_aperture = require_member(APERTURE_SCALE, aperture, "Aperture")

    def select_shutter(self, shutter: float | str):
        seconds = parse_shutter(shutter) if isinstance(shutter, str) else shutter
        self.settings.fixed_shutter = require_member(SHUTTER_SCALE, seconds, "Shutter")

    # ── Тик ───────────────────────────────────────────────────────────────────

    def reading(self, overlay: np.ndarray | None = None) -> MeterReading:
        value, label = resolve_settings(self.estimate.smoothed, self.settings)
        return MeterReading(
            ev=self.estimate.smoothed,
            raw_ev=self.estimate.raw,
            value=value,
            label=label,
            state=self.state,
            overlay=overlay,
        )

    def tick(self) -> MeterReading:
        """
        Один цикл. При блокировке кадр не читается и оценка не меняется.
        FrameNotReady и FrameSourceError пробрасываются источником как есть.
        """
        if self.locked:
            return self.reading()

        frame = self.source.read()
        buffer = downsample(frame)
        region = spot_region(buffer.shape[1], buffer.shape[0])
        sample(buffer, region, self.estimate)

        overlay = None
        if self.show_zones:
            overlay = render_overlay(classify_zones(buffer), frame.width, frame.height)

        self.ticks += 1
        return self.reading(overlay)

    # ── Жизненный цикл ────────────────────────────────────────────────────────

    async def start(self, max_ticks: int | None = None):
        if self._running:
            return
        # Остановленный цикл должен доработать и освободить источник до нового
        await self.join()
        if self._running:
            return
        self._running = True
        self.state = MeterState.LOCKED if self.locked else MeterState.SAMPLING
        self._task = asyncio.create_task(self._run_loop(max_ticks))
        logger.info("Meter session started")

    def request_stop(self):
        """Новых тиков не будет; текущий тик доработает."""
        self._running = False

    async def join(self):
        """Ждёт завершения цикла. FrameSourceError из цикла поднимается здесь."""
        if self._task is None:
            return
        task = self._task
        try:
            await task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None

    async def stop(self):
        self.request_stop()
        await self.join()
        logger.info("Meter session stopped after %d ticks", self.ticks)

    async def run(self, max_ticks: int | None = None):
        await self.start(max_ticks)
        await self.join()

    async def _run_loop(self, max_ticks: int | None):
        cycles = 0
        try:
            while self._running:
                if max_ticks is not None and cycles >= max_ticks:
                    break
                cycles += 1
                try:
                    reading = self.tick()
                    if self.on_reading is not None:
                        self.on_reading(reading)
                except FrameNotReady:
                    pass
                except FrameSourceError as e:
                    logger.error("Frame source failed: %s", e)
                    raise
                except Exception:
                    logger.exception("Meter tick %d failed, session continues", cycles)

                await asyncio.sleep(self.tick_interval)
        finally:
            self._running = False
            self.state = MeterState.IDLE
            self.source.release()
