# ── Настройки film_meter ──────────────────────────────────────────────────────

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

# ── Спот-метр ─────────────────────────────────────────────────────────────────

BASELINE_EV = 12.0            # EV серой карты при типичном пасмурном/комнатном свете
NEUTRAL_LUMA = 128.0          # средне-серый; fallback, если в споте нет пикселей
LUMA_PER_EV = 30.0            # шаг яркости (0–255) на одну ступень EV
INITIAL_EV = 10.0             # стартовое значение сглаженного EV

SMOOTHING = 0.9               # smoothed' = smoothed*0.9 + raw*0.1 (по тикам, не по времени)

SPOT_RADIUS_FRACTION = 0.15   # радиус спота — доля меньшей стороны кадра
DOWNSAMPLE_FACTOR = 4         # рабочий буфер: 1/4 ширины и высоты

# Калибровка экспонометра (EV)
CALIBRATION_MIN = -5.0
CALIBRATION_MAX = 5.0
CALIBRATION_STEP = 0.5

# ── Цикл измерения ────────────────────────────────────────────────────────────

TICK_INTERVAL = 1 / 60        # ~60 Гц
MAX_EMPTY_READS = 120         # подряд пустых кадров → источник считается мёртвым

# ── Зонная система (яркость 0–255, RGB) ───────────────────────────────────────

# (нижняя граница, верхняя граница, верхняя включительно, зона, цвет)
# Цвет None → тонировка с сохранением яркости (зона V)
ZONE_BANDS = (
    (0.0, 25.0, False, "0", (0, 0, 255)),        # глубокие тени → синий
    (25.0, 60.0, False, "III", (128, 0, 128)),   # тени с деталями → фиолетовый
    (118.0, 138.0, True, "V", None),             # средне-серый → зелёно-синий
    (190.0, 230.0, False, "VII", (255, 255, 0)), # света с деталями → жёлтый
    (230.0, 255.0, True, "X", (255, 0, 0)),      # пересвет → красный
)

# ── Проявка ───────────────────────────────────────────────────────────────────

THERMAL_FACTOR = 0.91         # время × 0.91 на каждый градус выше эталона
MIN_DEVELOP_SECONDS = 30      # ниже не компенсируем
TEMP_MIN = 10.0               # допустимый диапазон температуры (°C)
TEMP_MAX = 50.0
DEFAULT_TEMP = 20.0

AGITATION_CYCLE_SECONDS = 60  # цикл перемешивания
AGITATION_SECONDS = 10        # перемешивание в начале каждого цикла


# ── Модели данных ─────────────────────────────────────────────────────────────

class PriorityMode(str, Enum):
    """Какой член пары экспозиции задаёт пользователь."""
    APERTURE_FIXED = "aperture"   # Av: диафрагма фиксирована, считаем выдержку
    SHUTTER_FIXED = "shutter"     # Tv: выдержка фиксирована, считаем диафрагму


class StepCategory(str, Enum):
    DEVELOPER = "developer"
    OTHER = "other"


class MeterState(str, Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    LOCKED = "locked"


def validate_calibration(offset: float) -> float:
    """Проверяет поправку калибровки: [-5, +5] с шагом 0.5."""
    offset = float(offset)
    if not math.isfinite(offset) or not CALIBRATION_MIN <= offset <= CALIBRATION_MAX:
        raise ValueError(
            f"Calibration offset {offset} outside [{CALIBRATION_MIN}, {CALIBRATION_MAX}]"
        )
    steps = offset / CALIBRATION_STEP
    if not math.isclose(steps, round(steps), abs_tol=1e-9):
        raise ValueError(f"Calibration offset {offset} is not a multiple of {CALIBRATION_STEP}")
    return offset


@dataclass
class EVEstimate:
    """Оценка экспозиции, живёт всю сессию и обновляется каждый тик."""
    raw: float = INITIAL_EV               # мгновенное значение последнего тика
    smoothed: float = INITIAL_EV          # экспоненциальное среднее
    calibration_offset: float = 0.0       # пользовательская поправка (EV)


@dataclass(frozen=True)
class SpotRegion:
    """Круглая зона замера: центр (x, y) и радиус в пикселях буфера."""
    center: tuple[float, float]
    radius: float


@dataclass
class ExposureSettings:
    """Выбор пользователя: ISO, режим приоритета и фиксированный член пары."""
    iso: int = 400
    priority_mode: PriorityMode = PriorityMode.APERTURE_FIXED
    fixed_aperture: float = 2.8
    fixed_shutter: float = 1 / 60         # секунды

    @property
    def fixed_value(self) -> float:
        if self.priority_mode is PriorityMode.APERTURE_FIXED:
            return self.fixed_aperture
        return self.fixed_shutter


@dataclass(frozen=True)
class ReciprocityModel:
    """Плёнка и её показатель Шварцшильда p."""
    name: str
    exponent: float


@dataclass(frozen=True)
class DevelopmentStep:
    name: str
    category: StepCategory
    duration: int                          # секунды при эталонной температуре
    reference_temp: float = DEFAULT_TEMP
    description: str = ""


@dataclass(frozen=True)
class Recipe:
    """Набор шагов обработки с общей эталонной температурой."""
    id: str
    name: str
    temp: float
    steps: tuple[DevelopmentStep, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DilutionRequest:
    total_volume: float                    # мл
    ratio: float                           # частей воды на 1 часть концентрата
