# ── Проявка: температурная компенсация времени и таймер перемешивания ─────────

from __future__ import annotations

import math
from dataclasses import replace

from config import (
    AGITATION_CYCLE_SECONDS,
    AGITATION_SECONDS,
    MIN_DEVELOP_SECONDS,
    TEMP_MAX,
    TEMP_MIN,
    THERMAL_FACTOR,
    DevelopmentStep,
    Recipe,
    StepCategory,
)

DEV, OTHER = StepCategory.DEVELOPER, StepCategory.OTHER

RECIPES = (
    Recipe(
        id="bw-standard",
        name="B&W Standard",
        temp=20.0,
        steps=(
            DevelopmentStep("Dev", DEV, 360, 20.0, "Первые 30 с непрерывно, дальше 10 с каждую минуту"),
            DevelopmentStep("Stop", OTHER, 60, 20.0, "Непрерывное перемешивание"),
            DevelopmentStep("Fix", OTHER, 300, 20.0, "10 с каждую минуту"),
            DevelopmentStep("Wash", OTHER, 600, 20.0, "Проточная вода"),
            DevelopmentStep("Wetting", OTHER, 60, 20.0, "Замочить, не перемешивать"),
        ),
    ),
    Recipe(
        id="c41-standard",
        name="C-41 Color",
        temp=38.0,
        steps=(
            DevelopmentStep("Dev", DEV, 195, 38.0, "Строго 38°C!"),
            DevelopmentStep("Blix", OTHER, 390, 38.0, "Отбеливание + фиксирование"),
            DevelopmentStep("Wash", OTHER, 180, 38.0, "Тёплая вода"),
            DevelopmentStep("Stab", OTHER, 60, 38.0, "Замочить, не промывать"),
        ),
    ),
)


def validate_temperature(temp: float) -> float:
    if not TEMP_MIN <= temp <= TEMP_MAX:
        raise ValueError(f"Temperature {temp}°C outside [{TEMP_MIN:g}, {TEMP_MAX:g}]")
    return temp


def compensate(base_duration: float, reference_temp: float, actual_temp: float) -> int:
    """
    Время шага проявителя при другой температуре:
    max(30, round(base × 0.91^(actual − reference))).
    """
    validate_temperature(actual_temp)
    if base_duration < 0:
        raise ValueError(f"Duration must be non-negative, got {base_duration}")
    factor = THERMAL_FACTOR ** (actual_temp - reference_temp)
    # Округление половины вверх, а не банковское
    return max(MIN_DEVELOP_SECONDS, math.floor(base_duration * factor + 0.5))


def compensate_step(step: DevelopmentStep, actual_temp: float) -> DevelopmentStep:
    """Только шаги проявителя зависят от температуры; остальные как есть."""
    validate_temperature(actual_temp)
    if step.category is not StepCategory.DEVELOPER:
        return step
    return replace(step, duration=compensate(step.duration, step.reference_temp, actual_temp))


def compensate_recipe(recipe: Recipe, actual_temp: float) -> Recipe:
    """Пересчитывает рецепт от базовых времён (не накапливает поправки)."""
    steps = tuple(compensate_step(s, actual_temp) for s in recipe.steps)
    return replace(recipe, temp=actual_temp, steps=steps)


def find_recipe(recipe_id: str) -> Recipe:
    for recipe in RECIPES:
        if recipe.id == recipe_id:
            return recipe
    raise ValueError(f"Unknown recipe: {recipe_id!r}")


def format_clock(seconds: int) -> str:
    """'MM:SS'"""
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def agitation_state(duration: int, remaining: int, running: bool = True) -> tuple[int, int, bool]:
    """
    Состояние бачка для таймера шага.
    Возвращает (текущий цикл, всего циклов, сейчас перемешивать?).
    Перемешиваем первые 10 с каждой минуты, пока таймер идёт.
    """
    elapsed = duration - remaining
    total = math.ceil(duration / AGITATION_CYCLE_SECONDS)
    current = math.ceil(elapsed / AGITATION_CYCLE_SECONDS) or 1
    agitate = running and elapsed % AGITATION_CYCLE_SECONDS < AGITATION_SECONDS
    return current, total, agitate
