from __future__ import annotations

from typing import Callable, Dict, Optional, Union

from .models import RecipeModel

Formula = Callable[[RecipeModel, Dict[str, float]], float]
Coefficient = Union[int, float, Formula]

# Perfect overclock coefficient meaning "every available overclock is perfect".
MAX_OVERCLOCK = float("inf")


def resolve(coefficient: Coefficient, context: RecipeModel, floor: float = 0) -> float:
    # Literals are trusted constants; only formulas get the floor.
    if not callable(coefficient):
        return coefficient
    value = coefficient(context, context.choices)
    if value < floor:
        return floor
    return value


def resolve_optional(
    coefficient: Optional[Coefficient], context: RecipeModel, floor: float = 0
) -> Optional[float]:
    if coefficient is None:
        return None
    return resolve(coefficient, context, floor)
