"""Recipe item rewriters.

A rewriter receives ``(context, choices, items)`` and returns the item list
the machine actually consumes and produces. Items are frozen, so edits are
made with ``dataclasses.replace`` on a fresh list and the caller's sequence
stays untouched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Sequence

from .models import Goods, RecipeIoType, RecipeItem, RecipeModel
from .tiers import TIER_LV

RecipeRewriter = Callable[[RecipeModel, Dict[str, float], Sequence[RecipeItem]], List[RecipeItem]]

MAGMATTER_ID = "f:gregtech:molten.magmatter"
ALIGNMENT_MATRIX_ID = "i:gregtech:gt.metaitem.03:32758"
DTPF_RESIDUE_ID = "f:gregtech:dimensionallytranscendentresidue"
NEPTUNIUM_PLASMA_ID = "f:miscutils:plasma.neptunium"
FERMIUM_PLASMA_ID = "f:miscutils:plasma.fermium"

BACTERIAL_VAT_FILL = 1001
MUFFLED_GASES = ("CO2 Gas", "Sulfur Dioxide", "Carbon Monoxide")


def _injected(io_type: RecipeIoType, goods: Goods, amount: float) -> RecipeItem:
    return RecipeItem(type=io_type, goods=goods, slot=0, amount=amount, probability=1.0)


def bacterial_vat(context: RecipeModel, choices: Dict[str, float], items: Sequence[RecipeItem]) -> List[RecipeItem]:
    # Assumes the output hatch is always filled to the optimal ratio.
    return [
        replace(item, amount=item.amount * BACTERIAL_VAT_FILL)
        if item.type.is_fluid and item.goods.is_fluid
        else item
        for item in items
    ]


def blast_furnace_muffler(
    context: RecipeModel, choices: Dict[str, float], items: Sequence[RecipeItem]
) -> List[RecipeItem]:
    result = list(items)
    for index, item in enumerate(result):
        if (
            item.type == RecipeIoType.fluid_output
            and item.goods.is_fluid
            and item.goods.name in MUFFLED_GASES
        ):
            result[index] = replace(item, amount=choices["muffler"] * item.amount * 0.125)
            break
    return result


def nano_forge(context: RecipeModel, choices: Dict[str, float], items: Sequence[RecipeItem]) -> List[RecipeItem]:
    parallels = choices["parallels"]
    # Deliberate: a single T4 parallel runs as a plain recipe, with no nanite
    # input and no magmatter.
    if choices["tier"] < 3 or parallels <= 1:
        return list(items)

    result = list(items)
    # One nanite of the output is needed to unlock parallels; spread it over them.
    for item in items:
        if item.type == RecipeIoType.item_output:
            result.append(replace(item, type=RecipeIoType.item_input, amount=1.0 / parallels, slot=0))

    magmatter = parallels * (288 / 2 ** (4 - choices["tier"]))
    result.append(_injected(RecipeIoType.fluid_input, context.goods_by_id(MAGMATTER_ID), magmatter))
    return result


def pcb_factory(context: RecipeModel, choices: Dict[str, float], items: Sequence[RecipeItem]) -> List[RecipeItem]:
    production_multiplier = 100 / choices["traceSize"]
    return [
        replace(item, amount=math.floor(item.amount * production_multiplier))
        if item.type == RecipeIoType.item_output and not item.goods.is_fluid
        else item
        for item in items
    ]


@dataclass(frozen=True)
class DtpfCatalyst:
    tier: int
    display_name: str
    id: str
    eu_per_liter: float
    residue_per_liter: float


DTPF_CATALYSTS = [
    DtpfCatalyst(0, "Crude", "f:gregtech:exciteddtcc", 14_514_093, 0.125),
    DtpfCatalyst(1, "Prosaic", "f:gregtech:exciteddtpc", 66_768_460, 0.25),
    DtpfCatalyst(2, "Resplendent", "f:gregtech:exciteddtrc", 269_326_451, 0.5),
    DtpfCatalyst(3, "Exotic", "f:gregtech:exciteddtec", 1_073_007_393, 1.0),
    DtpfCatalyst(4, "Stellar", "f:gregtech:exciteddtsc", 4_276_767_521, 2.0),
]

DTPF_CATALYSTS_BY_ID = {catalyst.id: catalyst for catalyst in DTPF_CATALYSTS}


def find_dtpf_catalyst(items: Sequence[RecipeItem]) -> Optional[DtpfCatalyst]:
    for item in items:
        if item.type == RecipeIoType.fluid_input and item.goods.id in DTPF_CATALYSTS_BY_ID:
            return DTPF_CATALYSTS_BY_ID[item.goods.id]
    return None


def plasma_forge(context: RecipeModel, choices: Dict[str, float], items: Sequence[RecipeItem]) -> List[RecipeItem]:
    result = list(items)
    convergence = choices["convergence"] > 0
    if convergence:
        discount = 0.5
    else:
        discount = 0.0 if choices["discount"] == 0 else 0.5

    if convergence:
        # Convergence trades the extra overclocks' energy for catalyst fluid.
        recipe = context.recipe
        overclocks = context.overclock_tiers
        amperage = (recipe.amperage if recipe else 0) or 1
        voltage = (recipe.voltage if recipe else 0) or TIER_LV
        machine_consumption = amperage * voltage * 4**overclocks
        duration_ticks = ((recipe.duration_ticks if recipe else 0) or 1) / 4**overclocks
        required_eu = (2**overclocks - 1) * machine_consumption * duration_ticks

        catalyst = find_dtpf_catalyst(items) or DTPF_CATALYSTS[int(choices["catalyst"])]
        catalyst_liters = required_eu / catalyst.eu_per_liter
        residue_liters = math.floor(catalyst_liters * catalyst.residue_per_liter)

        result.append(_injected(RecipeIoType.item_input, context.goods_by_id(ALIGNMENT_MATRIX_ID), 0))
        result.append(_injected(RecipeIoType.fluid_input, context.goods_by_id(catalyst.id), catalyst_liters))
        result.append(_injected(RecipeIoType.fluid_output, context.goods_by_id(DTPF_RESIDUE_ID), residue_liters))

    if discount > 0.0:
        result = [
            replace(item, amount=item.amount * (1 - discount))
            if item.type == RecipeIoType.fluid_input and item.goods.id in DTPF_CATALYSTS_BY_ID
            else item
            for item in result
        ]
    return result


def chemical_plant(context: RecipeModel, choices: Dict[str, float], items: Sequence[RecipeItem]) -> List[RecipeItem]:
    if choices["coilTier"] >= 10 and choices["pipeCasingTier"] >= 3:
        return list(items)
    for index, item in enumerate(items):
        if item.type == RecipeIoType.item_input and not item.goods.is_fluid and item.goods.name.endswith("Catalyst"):
            result = list(items)
            result[index] = replace(item, amount=(1 - 0.2 * choices["pipeCasingTier"]) / 50)
            return result
    return list(items)


def _focused_probability(base: float, count: int, focused: bool, shielding: float, focus_tier: float) -> float:
    if focused:
        if shielding == focus_tier:
            return base + (base - base / 2.0) * (count - 1)
        if shielding == focus_tier + 1:
            return base + (base - base / 4.0) * (count - 1)
        if shielding >= focus_tier + 2:
            return 1.0
        return base
    if shielding == focus_tier:
        return base / 2.0
    if shielding == focus_tier + 1:
        return base / 4.0
    if shielding >= focus_tier + 2:
        return 0.0
    return base


def _focus_all_probability(probability: float, shielding: float, focus_tier: float) -> float:
    if shielding == focus_tier:
        return probability + (1.0 - probability) / 4.0
    if shielding == focus_tier + 1:
        return probability + (1.0 - probability) / 3.0
    if shielding >= focus_tier + 2:
        return probability + (1.0 - probability) / 2.0
    return probability


def quantum_force_transformer(
    context: RecipeModel, choices: Dict[str, float], items: Sequence[RecipeItem]
) -> List[RecipeItem]:
    outputs = sum(1 for item in items if item.type.is_output)
    if outputs == 0:
        return list(items)

    recipe = context.recipe
    focus_tier = recipe.metadata_by_key("qft_focus_tier") if recipe else None
    if focus_tier is None:
        focus_tier = 1
    shielding = choices["shielding"] + 1
    base = 1.0 / outputs

    result: List[RecipeItem] = []
    # Output positions follow the NEI order of the recipe.
    position = 0
    for item in items:
        if not item.type.is_output:
            result.append(item)
            continue
        probability = base
        if choices["focusedOutput"] > 0:
            focused = choices["focusedOutput"] == position + 1
            probability = _focused_probability(base, outputs, focused, shielding, focus_tier)
        if choices["focusedAll"]:
            probability = _focus_all_probability(probability, shielding, focus_tier)
        result.append(replace(item, probability=probability))
        position += 1

    plasma_amount = math.floor(4 * shielding * math.sqrt(choices["catalysts"]))
    if choices["focusedOutput"] > 0:
        result.append(_injected(RecipeIoType.fluid_input, context.goods_by_id(NEPTUNIUM_PLASMA_ID), plasma_amount))
    if choices["focusedAll"]:
        result.append(_injected(RecipeIoType.fluid_input, context.goods_by_id(FERMIUM_PLASMA_ID), plasma_amount))
    return result


SAW_MULTIPLIERS = [0, 1, 2, 4]
SAPLING_MULTIPLIERS = [0, 1, 4]
LEAVES_MULTIPLIERS = [0, 1, 2, 4]
FRUIT_MULTIPLIERS = [0, 1]

_TREE_SLOT_TOOLS = {
    0: ("saw", SAW_MULTIPLIERS),
    1: ("saplings", SAPLING_MULTIPLIERS),
    2: ("leaves", LEAVES_MULTIPLIERS),
    3: ("fruits", FRUIT_MULTIPLIERS),
}


def tree_growth_simulator(
    context: RecipeModel, choices: Dict[str, float], items: Sequence[RecipeItem]
) -> List[RecipeItem]:
    tier = context.voltage_tier + 1
    multiplier = 2 * tier * tier - 2 * tier + 5
    result: List[RecipeItem] = []
    for item in items:
        tool = _TREE_SLOT_TOOLS.get(item.slot)
        if item.type == RecipeIoType.item_output and not item.goods.is_fluid and tool:
            choice_name, multipliers = tool
            item = replace(item, amount=item.amount * multipliers[int(choices[choice_name])] * multiplier)
        result.append(item)
    return result
