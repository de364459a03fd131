# ── Невзаимозаместимость (reciprocity failure) для длинных выдержек ───────────

from __future__ import annotations

from config import ReciprocityModel

# Упрощённая модель Шварцшильда: t_actual = t_metered ** p
FILM_STOCKS = (
    ReciprocityModel("Kodak Portra 400", 1.35),
    ReciprocityModel("Kodak T-Max 100", 1.30),
    ReciprocityModel("Fuji Acros 100 II", 1.05),  # почти без провала
    ReciprocityModel("Ilford HP5 Plus", 1.31),
    ReciprocityModel("CineStill 800T", 1.40),
)


def compensate(metered_seconds: float, exponent: float) -> float:
    """Реальное время экспозиции. При 1 с результат всегда 1 с."""
    if metered_seconds <= 0:
        raise ValueError(f"Metered time must be positive, got {metered_seconds}")
    if exponent <= 0:
        raise ValueError(f"Reciprocity exponent must be positive, got {exponent}")
    return metered_seconds ** exponent


def compensate_for(metered_seconds: float, stock: ReciprocityModel) -> float:
    return compensate(metered_seconds, stock.exponent)


def compensation_delta(metered_seconds: float, exponent: float) -> float:
    """Сколько секунд добавить к замеру."""
    return compensate(metered_seconds, exponent) - metered_seconds


def find_stock(name: str) -> ReciprocityModel:
    """Поиск плёнки по имени (без учёта регистра, допускается подстрока)."""
    wanted = name.strip().lower()
    for stock in FILM_STOCKS:
        if stock.name.lower() == wanted:
            return stock
    matches = [s for s in FILM_STOCKS if wanted in s.name.lower()]
    if len(matches) == 1:
        return matches[0]
    raise ValueError(f"Unknown film stock: {name!r}")


def format_duration(seconds: float) -> str:
    """'12.5s' до минуты, дальше '1m 30s'."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes = int(seconds // 60)
    rest = int(seconds % 60 + 0.5)
    if rest == 60:
        minutes, rest = minutes + 1, 0
    return f"{minutes}m {rest}s"
