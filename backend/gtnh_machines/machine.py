from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Mapping, Optional

from .choices import Choice, resolve_choices, validate_choices
from .coefficients import Coefficient
from .eligibility import RecipeExcluder, make_compressor_excluder
from .models import Recipe, RecipeModel
from .overclock import OverclockAlgorithm
from .rewriters import RecipeRewriter

ConstraintEnforcer = Callable[[RecipeModel, Dict[str, float]], None]


@dataclass(frozen=True)
class Machine:
    """Behavior bundle for one processing machine.

    Optional hooks left as ``None`` fall back to: the default overclock, items
    passed through unchanged, no choice constraints, eligible for any recipe.
    """

    speed: Coefficient = 1
    power: Coefficient = 1
    parallels: Coefficient = 1
    perfect_overclock: Optional[Coefficient] = None
    choices: Mapping[str, Choice] = field(default_factory=dict)
    enforce_choice_constraints: Optional[ConstraintEnforcer] = None
    custom_overclock: Optional[OverclockAlgorithm] = None
    recipe: Optional[RecipeRewriter] = None
    excludes_recipe: Optional[RecipeExcluder] = None
    info: Optional[str] = None
    ignore_parallel_limit: bool = False
    fixed_voltage_tier: Optional[Coefficient] = None

    def is_eligible(self, recipe: Recipe) -> bool:
        if self.excludes_recipe is None:
            return True
        return not self.excludes_recipe(recipe)

    def resolve_choices(self, raw: Optional[Mapping[str, float]]) -> Dict[str, float]:
        return resolve_choices(self.choices, raw)

    def enforce_constraints(self, context: RecipeModel, choices: Dict[str, float]) -> None:
        if self.enforce_choice_constraints is not None:
            self.enforce_choice_constraints(context, choices)

    def validate_choices(self, choices: Mapping[str, float]) -> None:
        validate_choices(self.choices, choices)


SINGLE_BLOCK_MACHINE = Machine(
    perfect_overclock=0,
    excludes_recipe=make_compressor_excluder(0),
)

MASS_FABRICATOR = Machine(
    perfect_overclock=0,
    power=lambda recipe, choices: 0.5**recipe.voltage_tier,
)

NOT_IMPLEMENTED_MACHINE = Machine(
    perfect_overclock=0,
    info="Machine not implemented (Calculated as a singleblock)",
)


def single_block_machine_for(recipe_type: str) -> Machine:
    if recipe_type == "Mass Fabrication":
        return MASS_FABRICATOR
    return SINGLE_BLOCK_MACHINE
