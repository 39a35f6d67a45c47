from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional

from .coefficients import resolve, resolve_optional
from .machine import Machine
from .models import OverclockResult, RecipeItem, RecipeModel
from .overclock import DefaultOverclock, default_overclock
from .tiers import voltage_of

logger = logging.getLogger("gtnh_machines.evaluate")


@dataclass(frozen=True)
class MachineEvaluation:
    voltage_tier: int
    choices: Dict[str, float]
    speed: float
    power: float
    parallels: float
    overclock: OverclockResult
    items: List[RecipeItem]
    info: Optional[str] = None

    @property
    def total_speed(self) -> float:
        return self.speed * self.overclock.speed_multiplier * self.parallels

    @property
    def total_power(self) -> float:
        return self.power * self.overclock.power_multiplier


def parallel_limit(context: RecipeModel, power: float) -> Optional[int]:
    """Parallels the energy hatch can feed, or ``None`` when the recipe needs no energy."""
    recipe = context.recipe
    if recipe is None:
        return None
    recipe_eut = recipe.voltage * recipe.amperage * power
    if recipe_eut <= 0:
        return None
    return max(1, math.floor(voltage_of(context.voltage_tier) / recipe_eut))


def evaluate_machine(
    machine: Machine,
    context: RecipeModel,
    default: DefaultOverclock = default_overclock,
    choices: Optional[Mapping[str, float]] = None,
) -> MachineEvaluation:
    """Run constraints, coefficients, overclock and item rewrite, in that order.

    ``choices`` overrides ``context.choices`` as the raw user input; the
    caller's map is never modified. Raises :class:`ChoiceError` when a choice
    is still out of range after the machine's own repairs.
    """
    resolved = machine.resolve_choices(context.choices if choices is None else choices)
    machine.enforce_constraints(context, resolved)
    machine.validate_choices(resolved)

    context = replace(context, choices=resolved)
    fixed_tier = resolve_optional(machine.fixed_voltage_tier, context)
    if fixed_tier is not None:
        context = replace(context, voltage_tier=int(fixed_tier))

    speed = resolve(machine.speed, context)
    power = resolve(machine.power, context)
    parallels = resolve(machine.parallels, context)

    overclock_tiers = context.overclock_tiers
    if machine.custom_overclock is not None:
        overclock = machine.custom_overclock(context, overclock_tiers, default)
    else:
        perfect = resolve_optional(machine.perfect_overclock, context) or 0
        overclock = default(context, overclock_tiers, perfect)

    if not machine.ignore_parallel_limit:
        limit = parallel_limit(context, power)
        if limit is not None and parallels > limit:
            logger.debug("parallels %s capped to %s by energy", parallels, limit)
            parallels = limit

    items = list(context.recipe.items) if context.recipe else []
    if machine.recipe is not None:
        items = machine.recipe(context, resolved, items)

    return MachineEvaluation(
        voltage_tier=context.voltage_tier,
        choices=resolved,
        speed=speed,
        power=power,
        parallels=parallels,
        overclock=overclock,
        items=items,
        info=machine.info,
    )
