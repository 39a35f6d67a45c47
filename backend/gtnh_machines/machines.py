"""The machine table.

Each entry mirrors the in-game multiblock: speed and power are relative to a
singleblock of the same voltage, parallels is the batch size before the
energy cap. ``build_registry`` is called once at import to produce
``MACHINES``.
"""

from __future__ import annotations

import logging
import math
from typing import Dict

from .choices import Choice
from .coefficients import MAX_OVERCLOCK, Coefficient
from .eligibility import make_compressor_excluder, make_fusion_excluder, make_space_assembler_excluder
from .machine import NOT_IMPLEMENTED_MACHINE, Machine
from .models import RecipeModel
from .overclock import (
    ebf_perfect_overclock,
    ebf_power,
    fusion_tier,
    laser_overclock,
    make_fusion_overclock,
    make_gated_overclock,
    make_space_assembler_overclock,
    make_tier_delta_overclock,
    no_overclock,
)
from .registry import MachineRegistry
from .rewriters import (
    DTPF_CATALYSTS,
    bacterial_vat,
    blast_furnace_muffler,
    chemical_plant,
    find_dtpf_catalyst,
    nano_forge,
    pcb_factory,
    plasma_forge,
    quantum_force_transformer,
    tree_growth_simulator,
)
from .tiers import (
    COIL_TIER_NAMES,
    TIER_LUV,
    TIER_LV,
    TIER_UEV,
    TIER_UHV,
    TIER_UIV,
    TIER_UV,
    TIER_UXV,
    TIER_ZPM,
)

logger = logging.getLogger("gtnh_machines.machines")

COIL_TIER_CHOICE = Choice(
    description="Coils",
    options=[f"T{index + 1}: {name}" for index, name in enumerate(COIL_TIER_NAMES)],
)

PIPE_CASING_TIER_CHOICE = Choice(
    description="Pipe Casing Tier",
    options=[
        "T1: Tin",
        "T2: Brass",
        "T3: Electrum",
        "T4: Platinum",
        "T5: Osmium",
        "T6: Quantium",
        "T7: Fluxed Electrum",
        "T8: Black Plutonium",
    ],
)

ELECTROMAGNETS = [
    {"name": "Iron Electromagnet", "speed": 1.1, "power": 0.8, "parallels": 8},
    {"name": "Steel Electromagnet", "speed": 1.25, "power": 0.75, "parallels": 24},
    {"name": "Neodymium Electromagnet", "speed": 1.5, "power": 0.7, "parallels": 48},
    {"name": "Samarium Electromagnet", "speed": 2, "power": 0.6, "parallels": 96},
    {"name": "Tengam Electromagnet", "speed": 2.5, "power": 0.5, "parallels": 256},
]

PRECISION_LATHE_PARALLELS = [1, 1, 2, 4, 8, 12, 16, 32]
PRECISION_LATHE_SPEED = [0.75, 0.8, 0.9, 1, 1.5, 2, 3, 4]


def per_tier(factor: float) -> Coefficient:
    """Parallels growing linearly with the voltage tier (LV = 1 step)."""
    return lambda model, choices: (model.voltage_tier + 1) * factor


def is_recipe_type(model: RecipeModel, recipe_type: str) -> bool:
    return model.recipe is not None and model.recipe.recipe_type == recipe_type


def _metadata(model: RecipeModel, key: str, default: float) -> float:
    value = model.recipe.metadata_by_key(key) if model.recipe else None
    return default if value is None else value


def _raise_choice_to_metadata(choice_name: str, metadata_key: str):
    """Building tiers below what the recipe needs are bumped up to it."""

    def enforce(model: RecipeModel, choices: Dict[str, float]) -> None:
        required = _metadata(model, metadata_key, 1)
        choices[choice_name] = max(choices[choice_name], required - 1)

    return enforce


def _nano_forge_perfect_overclock(model: RecipeModel, choices: Dict[str, float]) -> float:
    needed_tier = _metadata(model, "nano_forge_tier", 1)
    building_tier = choices["tier"] + 1
    if (building_tier < 4 or needed_tier < 3) and building_tier > needed_tier:
        return MAX_OVERCLOCK
    if needed_tier == 3 and choices["parallels"] > 1:
        return MAX_OVERCLOCK
    return 0


def _nano_forge_constraints(model: RecipeModel, choices: Dict[str, float]) -> None:
    tier = _metadata(model, "nano_forge_tier", 1)
    choices["tier"] = max(choices["tier"], tier - 1)
    if choices["tier"] != 3:
        choices["parallels"] = 1


def _pcb_perfect_overclock(model: RecipeModel, choices: Dict[str, float]) -> float:
    return MAX_OVERCLOCK if choices["cooling"] >= 2 else 0


def _plasma_forge_constraints(model: RecipeModel, choices: Dict[str, float]) -> None:
    if choices["convergence"] > 0:
        choices["discount"] = 1
    catalyst = find_dtpf_catalyst(model.recipe.items if model.recipe else ())
    if catalyst:
        choices["catalyst"] = catalyst.tier


def _qft_constraints(model: RecipeModel, choices: Dict[str, float]) -> None:
    focus_tier = _metadata(model, "qft_focus_tier", 1)
    choices["manipulator"] = max(choices["manipulator"], focus_tier - 1)
    if choices["shielding"] + 1 < focus_tier:
        # Shielding too weak to focus at all.
        choices["focusedOutput"] = 0
        choices["focusedAll"] = 0
    else:
        choices["focusedOutput"] = min(choices["focusedOutput"], model.output_count())


def _defc_perfect_overclock(model: RecipeModel, choices: Dict[str, float]) -> float:
    building_tier = choices["casings"] + 1
    recipe_tier = _metadata(model, "defc_casing_tier", 1)
    return max(0, building_tier - recipe_tier)


def _compact_fusion_parallels(tier: int) -> Coefficient:
    return lambda model, choices: (1 + tier - fusion_tier(model.recipe)) * 64


def _matter_fabricator_parallels(model: RecipeModel, choices: Dict[str, float]) -> float:
    scrap = model.recipe is not None and model.recipe.voltage_tier == TIER_LV
    return 64 if scrap else 8 * (model.voltage_tier + 1)


def _register_steam(registry: MachineRegistry) -> None:
    registry.register(
        Machine(
            custom_overclock=no_overclock,
            speed=0.5,
            power=0,
            parallels=1,
            excludes_recipe=make_compressor_excluder(0),
            info="Steam machine: Steam consumption not calculated",
        ),
        "Steam Compressor",
        "Steam Alloy Smelter",
        "Steam Extractor",
        "Steam Furnace",
        "Steam Forge Hammer",
        "Steam Macerator",
    )
    registry.register(
        Machine(
            custom_overclock=no_overclock,
            speed=1,
            power=0,
            parallels=1,
            excludes_recipe=make_compressor_excluder(0),
            info="High pressure steam machine: Steam consumption not calculated",
        ),
        "High Pressure Steam Compressor",
        "High Pressure Alloy Smelter",
        "High Pressure Steam Extractor",
        "High Pressure Steam Furnace",
        "High Pressure Steam Forge Hammer",
        "High Pressure Steam Macerator",
    )
    registry.register(
        Machine(
            custom_overclock=no_overclock,
            speed=lambda model, choices: 1.25 if choices["pressure"] == 1 else 0.625,
            power=0,
            parallels=8,
            excludes_recipe=make_compressor_excluder(0),
            info="Steam multiblock machine: Steam consumption not calculated",
            choices={"pressure": Choice("Pressure", options=["Normal", "High"])},
        ),
        "Steam Squasher",
        "Steam Separator",
        "Steam Presser",
        "Steam Grinder",
        "Steam Purifier",
        "Steam Blender",
    )


def _register_compressors(registry: MachineRegistry) -> None:
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=2,
            power=0.9,
            parallels=per_tier(2),
            excludes_recipe=make_compressor_excluder(0),
        ),
        "Large Electric Compressor",
    )
    # TODO: model the overheated mode (250%/110% and 1 parallel per tier).
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=2.5,
            power=0.75,
            parallels=per_tier(4),
            excludes_recipe=make_compressor_excluder(1),
            info="Assumes it is not overheated",
        ),
        "Hot Isostatic Pressurization Unit",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=5,
            power=0.7,
            parallels=per_tier(8),
            excludes_recipe=make_compressor_excluder(2),
            info="Parallels depend on stability, which is not represented.",
        ),
        "Pseudostable Black Hole Containment Field",
    )
    registry.register(
        Machine(perfect_overclock=0, parallels=8, excludes_recipe=make_compressor_excluder(0)),
        "Neutronium Compressor",
    )


def _register_blast_furnaces(registry: MachineRegistry) -> None:
    registry.register(
        Machine(
            perfect_overclock=ebf_perfect_overclock,
            speed=1,
            power=ebf_power,
            parallels=1,
            recipe=blast_furnace_muffler,
            choices={
                "coilTier": COIL_TIER_CHOICE,
                "muffler": Choice(
                    "Muffler hatch",
                    options=[
                        "LV (0%)",
                        "MV (12.5%)",
                        "HV (25%)",
                        "EV (37.5%)",
                        "IV (50%)",
                        "LuV (62.5%)",
                        "ZPM (75%)",
                        "UV (87.5%)",
                        "UHV (100%)",
                    ],
                ),
            },
        ),
        "Electric Blast Furnace",
    )
    registry.register(
        Machine(
            perfect_overclock=ebf_perfect_overclock,
            speed=2.2,
            power=lambda model, choices: ebf_power(model, choices) * 0.9,
            parallels=8,
            choices={"coilTier": COIL_TIER_CHOICE},
            info="Blazing pyrotheum required (Not calculated)",
        ),
        "Volcanus",
    )
    # Name before 2.8; renamed to Mega Electric Blast Furnace since.
    registry.register(
        Machine(
            perfect_overclock=ebf_perfect_overclock,
            speed=1,
            power=ebf_power,
            parallels=256,
            choices={"coilTier": COIL_TIER_CHOICE},
        ),
        "Mega Blast Furnace",
    )
    registry.alias("Mega Electric Blast Furnace", "Mega Blast Furnace")
    registry.register(Machine(perfect_overclock=0), "Bricked Blast Furnace")
    registry.register(Machine(perfect_overclock=0), "Alloy Blast Smelter")
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: max(1, 1 - 0.05 * (choices["coilTier"] - 3)),
            power=lambda model, choices: 0.95 ** (choices["coilTier"] - model.voltage_tier),
            parallels=256,
            choices={"coilTier": COIL_TIER_CHOICE},
            info="Assumes matching glass tier.",
        ),
        "Mega Alloy Blast Smelter",
    )


def _register_fusion(registry: MachineRegistry) -> None:
    reactors = [
        ("Fusion Control Computer Mark I", TIER_LUV, 1, 2),
        ("Fusion Control Computer Mark II", TIER_ZPM, 2, 2),
        ("Fusion Control Computer Mark III", TIER_UV, 3, 2),
        ("FusionTech MK IV", TIER_UHV, 4, 4),
        ("FusionTech MK V", TIER_UEV, 5, 4),
    ]
    for name, voltage_tier, tier, multiplier in reactors:
        registry.register(
            Machine(
                fixed_voltage_tier=voltage_tier,
                custom_overclock=make_fusion_overclock(tier, multiplier),
                excludes_recipe=make_fusion_excluder(tier),
                info="NOTE: overrides voltage tier",
            ),
            name,
        )

    registry.register(
        Machine(
            parallels=64,
            ignore_parallel_limit=True,
            fixed_voltage_tier=TIER_LUV + 3,
            custom_overclock=make_fusion_overclock(1, 2),
            excludes_recipe=make_fusion_excluder(1),
            info="NOTE: overrides voltage tier",
        ),
        "Compact Fusion Computer MK-I Prototype",
    )
    compact = [
        ("Compact Fusion Computer MK-II", TIER_ZPM + 4, 2, 2),
        ("Compact Fusion Computer MK-III", TIER_UV + 4, 3, 2),
        ("Compact Fusion Computer MK-IV Prototype", TIER_UHV + 4, 4, 4),
        ("Compact Fusion Computer MK-V", TIER_UEV + 5, 5, 4),
    ]
    for name, voltage_tier, tier, multiplier in compact:
        registry.register(
            Machine(
                parallels=_compact_fusion_parallels(tier),
                ignore_parallel_limit=True,
                fixed_voltage_tier=voltage_tier,
                custom_overclock=make_fusion_overclock(tier, multiplier),
                excludes_recipe=make_fusion_excluder(tier),
                info="NOTE: overrides voltage tier",
            ),
            name,
        )


def _register_space_assemblers(registry: MachineRegistry) -> None:
    modules = [
        ("Space Assembler Module MK-I", TIER_UHV, 1, 4),
        ("Space Assembler Module MK-II", TIER_UIV, 2, 16),
        ("Space Assembler Module MK-III", TIER_UXV, 3, 64),
    ]
    for name, max_voltage_tier, tier, parallels in modules:
        registry.register(
            Machine(
                perfect_overclock=0,
                parallels=parallels,
                ignore_parallel_limit=True,
                custom_overclock=make_space_assembler_overclock(max_voltage_tier, tier),
                fixed_voltage_tier=max_voltage_tier + tier,
                excludes_recipe=make_space_assembler_excluder(tier),
                info="NOTE: overrides voltage tier",
            ),
            name,
        )


def _register_special(registry: MachineRegistry) -> None:
    registry.register(
        Machine(
            perfect_overclock=0,
            info="Assumes perfect fill rate (x1001)",
            recipe=bacterial_vat,
        ),
        "Bacterial Vat",
    )
    registry.register(
        Machine(
            custom_overclock=make_tier_delta_overclock("nfr_coil_tier", "coils"),
            choices={
                "coils": Choice(
                    "Coils",
                    options=[
                        "T1 Field Restriction Coil",
                        "T2 Advanced Field Restriction Coil",
                        "T3 Ultimate Field Restriction Coil",
                        "T4 Temporal Field Restriction Coil",
                    ],
                )
            },
            enforce_choice_constraints=_raise_choice_to_metadata("coils", "nfr_coil_tier"),
        ),
        "Naquadah Fuel Refinery",
    )
    registry.register(
        Machine(
            speed=lambda model, choices: (1 / 0.9) ** (choices["speedingPipeCasing"] - 4),
            power=0,
            custom_overclock=no_overclock,
            choices={"speedingPipeCasing": Choice("Speeding Pipe Casing", min=4)},
            info="Power calculation is not implemented.",
        ),
        "Neutron Activator",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: 1 if is_recipe_type(model, "Precise Assembler") else 2,
            parallels=lambda model, choices: 2 ** choices["precisionTier"] * 16,
            choices={
                "precisionTier": Choice(
                    "Precision Tier",
                    options=["Imprecise (MK-0)", "MK-I", "MK-II", "MK-III", "MK-IV"],
                )
            },
        ),
        "Precise Auto-Assembler MT-3662",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=3,
            power=0.8,
            parallels=lambda model, choices: (model.voltage_tier + 1) * (2 + 3 * choices["widthExpansion"]),
            choices={"widthExpansion": Choice("Width Expansion", max=6)},
            info="Assuming running at max speed.",
        ),
        "Fluid Shaper",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: 1 + choices["coilTier"] * 0.05,
            parallels=lambda model, choices: (model.voltage_tier + 1) * choices["coilTier"],
            choices={"coilTier": COIL_TIER_CHOICE},
        ),
        "Zyngen",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=3.5,
            parallels=lambda model, choices: (
                (model.voltage_tier + 1) * 8 * choices["w"]
                if is_recipe_type(model, "Plasma Arc Furnace")
                else (model.voltage_tier + 1) * choices["w"]
            ),
            choices={"w": Choice("W", min=1)},
        ),
        "High Current Industrial Arc Furnace",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: 1.25 + choices["coilTier"] * 0.25,
            power=lambda model, choices: (11 - choices["pipeCasingTier"]) / 12,
            parallels=lambda model, choices: choices["pipeCasingTier"] * 12 + 12,
            choices={"coilTier": COIL_TIER_CHOICE, "pipeCasingTier": PIPE_CASING_TIER_CHOICE},
        ),
        "Industrial Autoclave",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            power=lambda model, choices: 1 - min(0.5, (choices["coilTier"] + 1) * 0.1),
            choices={"coilTier": COIL_TIER_CHOICE},
        ),
        "Oil Cracking Unit",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            power=lambda model, choices: 1 - min(0.5, (choices["coilTier"] + 1) * 0.1),
            parallels=256,
            choices={"coilTier": COIL_TIER_CHOICE},
        ),
        "Mega Oil Cracker",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: 3.5 if is_recipe_type(model, "Distillation Tower") else 2,
            power=lambda model, choices: 1 if is_recipe_type(model, "Distillation Tower") else 0.85,
            parallels=lambda model, choices: (
                12 if is_recipe_type(model, "Distillation Tower") else (model.voltage_tier + 1) * 8
            ),
        ),
        "Dangote Distillus",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            parallels=lambda model, choices: 4 ** choices["containmentBlockTier"],
            choices={
                "containmentBlockTier": Choice(
                    "Containment Block Tier",
                    options=["Neutronium", "Infinity", "Transcendent Metal", "SpaceTime", "Universum"],
                )
            },
        ),
        "Electric Implosion Compressor",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: ELECTROMAGNETS[int(choices["electromagnet"])]["speed"],
            power=lambda model, choices: ELECTROMAGNETS[int(choices["electromagnet"])]["power"],
            parallels=lambda model, choices: ELECTROMAGNETS[int(choices["electromagnet"])]["parallels"],
            choices={"electromagnet": Choice("Electromagnet", options=[m["name"] for m in ELECTROMAGNETS])},
        ),
        "Magnetic Flux Exhibitor",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=3,
            power=0.85,
            parallels=lambda model, choices: (choices["pipeCasingTier"] + 1) * 8,
            choices={"pipeCasingTier": PIPE_CASING_TIER_CHOICE},
        ),
        "Dissection Apparatus",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            custom_overclock=laser_overclock,
            parallels=lambda model, choices: model.item_input_count(),
            # Separate amperage is not understood by the parallel cap.
            ignore_parallel_limit=True,
            choices={"inputAmperage": Choice("Input Amperage", min=16)},
            info=(
                "NOTE: Voltage determines the energy hatch voltage, not maximum voltage. "
                "WARNING: Calculates beyond 1 slice per tick."
            ),
        ),
        "Advanced Assembly Line",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: 1.5 * 1.10 ** (choices["coilTier"] + 1),
            power=lambda model, choices: 0.80 * 0.90 ** (choices["coilTier"] + 1),
            parallels=lambda model, choices: (choices["solenoidTier"] + 2) * 8,
            choices={
                "coilTier": COIL_TIER_CHOICE,
                "solenoidTier": Choice(
                    "Solenoid Tier",
                    options=["MV", "HV", "EV", "IV", "LuV", "ZPM", "UV", "UHV", "UEV", "UIV", "UMV"],
                ),
            },
        ),
        "Large Fluid Extractor",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            parallels=lambda model, choices: 8 * 2 ** choices["coilTier"],
            choices={"coilTier": COIL_TIER_CHOICE},
            info="Parallel amount needs testing!",
        ),
        "Multi Smelter",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=2,
            parallels=lambda model, choices: (model.voltage_tier + 1) * (choices["anvilTier"] + 1) * 8,
            choices={
                "anvilTier": Choice(
                    "Anvil Tier",
                    options=["T1 - Vanilla", "T2 - Steel", "T3 - Dark Steel / Thaumium", "T4 - Void Metal"],
                )
            },
        ),
        "Industrial Sledgehammer",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=2,
            parallels=lambda model, choices: math.floor((model.voltage_tier + 1) / 2) + 1,
        ),
        "Density^2",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=3.5,
            power=0.8,
            parallels=lambda model, choices: math.floor(math.cbrt(choices["laserAmperage"])),
            choices={"laserAmperage": Choice("Laser Amperage", min=1)},
        ),
        "Hyper-Intensity Laser Engraver",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: (
                PRECISION_LATHE_SPEED[int(choices["itemPipeCasings"])] + model.voltage_tier + 1
            )
            / 4,
            power=0.8,
            parallels=lambda model, choices: (
                PRECISION_LATHE_PARALLELS[int(choices["itemPipeCasings"])] + (model.voltage_tier + 1) * 2
            ),
            choices={"itemPipeCasings": PIPE_CASING_TIER_CHOICE},
        ),
        "Industrial Precision Lathe",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=1.6,
            parallels=lambda model, choices: (8 if choices["upgradeChip"] == 1 else 2) * (model.voltage_tier + 1),
            choices={"upgradeChip": Choice("Upgrade Chip", options=["No Upgrade", "Maceration Upgrade Chip"])},
        ),
        "Industrial Maceration Stack",
    )
    registry.register(
        Machine(
            perfect_overclock=_nano_forge_perfect_overclock,
            speed=lambda model, choices: (
                1 / 0.9999 ** choices["parallels"] if choices["tier"] == 3 and choices["parallels"] > 1 else 1
            ),
            parallels=lambda model, choices: choices["parallels"],
            recipe=nano_forge,
            choices={
                "tier": Choice(
                    "Tier",
                    options=[
                        "T1 (Carbon Nanite)",
                        "T2 (Neutronium Nanite)",
                        "T3 (Transcendent Metal Nanite)",
                        "T4 (Eternity Nanite)",
                    ],
                ),
                "parallels": Choice("Parallels", min=1),
            },
            enforce_choice_constraints=_nano_forge_constraints,
        ),
        "Nano Forge",
    )
    registry.register(
        Machine(
            perfect_overclock=_pcb_perfect_overclock,
            speed=lambda model, choices: 1 / (100 / choices["traceSize"]) ** 2,
            power=lambda model, choices: math.sqrt(2) if choices["cooling"] > 0 and choices["biochamber"] > 0 else 1,
            custom_overclock=make_gated_overclock("cooling", _pcb_perfect_overclock),
            parallels=lambda model, choices: min(256, math.ceil(choices["nanites"] ** 0.75)),
            recipe=pcb_factory,
            choices={
                "nanites": Choice("Nanites", min=1),
                "traceSize": Choice("Trace Size", min=50, max=200),
                "biochamber": Choice("Biochamber", options=["No Biochamber", "Biochamber"]),
                "cooling": Choice("Cooling", options=["No Cooling", "Liquid Cooling", "Thermosink Radiator"]),
            },
        ),
        "PCB Factory",
    )
    registry.register(
        Machine(
            perfect_overclock=lambda model, choices: MAX_OVERCLOCK if choices["convergence"] > 0 else 0,
            power=lambda model, choices: 0.5 if choices["convergence"] > 0 else 1,
            recipe=plasma_forge,
            choices={
                "convergence": Choice("Convergence", options=["No Convergence", "Convergence"]),
                "discount": Choice("Discount", options=["0%", "50%"]),
                "catalyst": Choice("Catalyst", options=[catalyst.display_name for catalyst in DTPF_CATALYSTS]),
            },
            enforce_choice_constraints=_plasma_forge_constraints,
        ),
        "Dimensionally Transcendent Plasma Forge",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: (choices["coils"] + 1) * 0.5,
            choices={"coils": COIL_TIER_CHOICE},
        ),
        "Pyrolyse Oven",
    )
    registry.register(
        Machine(
            custom_overclock=no_overclock,
            power=10,
            parallels=lambda model, choices: choices["parallels"],
            choices={"parallels": Choice("Parallels", min=1)},
        ),
        "Transcendent Plasma Mixer",
    )
    registry.register(NOT_IMPLEMENTED_MACHINE, "Forge of the Gods")
    registry.register(
        Machine(
            perfect_overclock=lambda model, choices: choices["coolant"],
            parallels=256,
            choices={
                "coolant": Choice(
                    "Coolant",
                    options=["No Coolant", "Molten SpaceTime", "Spatially Enlarged Fluid", "Molten Eternity"],
                )
            },
            info="Coolant calculation not implemented.",
        ),
        "Mega Vacuum Freezer",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            power=lambda model, choices: 1 - (model.voltage_tier + 1) * 0.04,
            parallels=lambda model, choices: 30 if choices["casingType"] == 1 else 18,
            choices={"casingType": Choice("Casing Type", options=["Heat Resistant Casings", "Heat Proof Casings"])},
        ),
        "Industrial Coke Oven",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            speed=lambda model, choices: choices["coilTier"] * 0.5 + 0.5,
            parallels=lambda model, choices: (choices["pipeCasingTier"] + 1) * 2,
            recipe=chemical_plant,
            choices={
                "coilTier": COIL_TIER_CHOICE,
                "pipeCasingTier": Choice(
                    "Pipe Casing Tier",
                    options=["T1: Bronze", "T2: Steel", "T3: Titanium", "T4: Tungstensteel"],
                ),
            },
        ),
        "ExxonMobil Chemical Plant",
    )
    registry.register(
        Machine(perfect_overclock=0, power=0.8, parallels=_matter_fabricator_parallels),
        "Matter Fabrication CPU",
    )
    registry.register(
        Machine(
            perfect_overclock=lambda model, choices: math.floor(choices["heatIncrements"] / 2),
            speed=lambda model, choices: 2.2 * 1.05 ** choices["heatIncrements"],
            power=0.5,
            parallels=4,
            choices={"heatIncrements": Choice("Heat Difference Tiers", min=0)},
            info="Extracting heat difference from the recipe is not implemented.",
        ),
        "Utupu-Tanuri",
    )
    registry.register(
        Machine(
            perfect_overclock=0,
            parallels=lambda model, choices: choices["catalysts"],
            recipe=quantum_force_transformer,
            choices={
                "catalysts": Choice("Catalysts", min=1),
                "shielding": Choice("Shielding", options=["Neutron", "Cosmic", "Infinity", "SpaceTime"]),
                "manipulator": Choice("Manipulator", options=["Neutron", "Cosmic", "Infinity", "SpaceTime"]),
                "focusedOutput": Choice("Focused Output", options=["None", "1", "2", "3", "4", "5", "6"]),
                "focusedAll": Choice("Focus All", options=["No", "Yes"]),
            },
            enforce_choice_constraints=_qft_constraints,
        ),
        "Quantum Force Transformer",
    )
    registry.register(
        Machine(
            recipe=tree_growth_simulator,
            custom_overclock=no_overclock,
            choices={
                "saw": Choice("Saw", options=["No saw", "Saw (x1)", "Buzzsaw (x2)", "Chainsaw (x4)"]),
                "saplings": Choice("Saplings", options=["No grafter", "Branch cutter (x1)", "Grafter (x4)"]),
                "leaves": Choice(
                    "Leaves",
                    options=["No shears", "Shears (x1)", "Wire Cutter (x2)", "Automatic Snips (x4)"],
                ),
                "fruits": Choice("Fruits", options=["No knife", "Knife (x1)"]),
            },
        ),
        "Tree Growth Simulator",
    )
    registry.register(
        Machine(
            perfect_overclock=_defc_perfect_overclock,
            choices={
                "casings": Choice(
                    "Fusion casings",
                    options=["Bloody Ichorium", "Draconium", "Wyvern", "Awakened Draconium", "Chaotic"],
                )
            },
            enforce_choice_constraints=_raise_choice_to_metadata("casings", "defc_casing_tier"),
        ),
        "Draconic Evolution Fusion Crafter",
    )


# (name, speed, power, parallels) for machines with no choices or hooks.
_PLAIN_MACHINES = [
    ("Extreme Heat Exchanger", 1, 1, 1),
    ("Large Scale Auto-Assembler v1.01", 3, 1, per_tier(2)),
    ("Big Barrel Brewery", 1.5, 1, per_tier(4)),
    ("TurboCan Pro", 2, 1, per_tier(8)),
    ("Ore Washing Plant", 5, 1, per_tier(4)),
    ("Industrial Cutting Factory", 3, 0.75, per_tier(4)),
    ("Distillation Tower", 1, 1, 1),
    ("Mega Distillation Tower", 1, 1, 256),
    ("Industrial Extrusion Machine", 3.5, 1, per_tier(4)),
    ("Assembly Line", 1, 1, 1),
    ("Thermic Heating Device", 2.2, 0.9, per_tier(8)),
    ("Furnace", 1, 1, 1),
    ("Nuclear Reactor", 1, 1, 1),
    ("Implosion Compressor", 1, 1, 1),
    ("Industrial Material Press", 6, 1, per_tier(4)),
    ("Amazon Warehousing Depot", 6, 0.75, per_tier(16)),
    ("Clarifier Purification Unit", 1, 1, 1),
    ("Residual Decontaminant Degasser Purification Unit", 1, 1, 1),
    ("Flocculation Purification Unit", 1, 1, 1),
    ("Ozonation Purification Unit", 1, 1, 1),
    ("pH Neutralization Purification Unit", 1, 1, 1),
    ("Extreme Temperature Fluctuation Purification Unit", 1, 1, 1),
    ("Elemental Duplicator", 2, 1, per_tier(8)),
    ("Research station", 1, 1, 1),
    ("Boldarnator", 3, 0.75, per_tier(8)),
    ("Large Thermal Refinery", 2.5, 0.8, per_tier(8)),
    ("Vacuum Freezer", 1, 1, 1),
    ("Industrial Wire Factory", 3, 0.75, per_tier(4)),
    ("Dissolution Tank", 1, 1, 1),
    ("Target Chamber", 1, 1, 1),
    ("Cryogenic Freezer", 2, 1, 4),
    ("COMET - Compact Cyclotron", 1, 1, 1),
    ("Zhuhai - Fishing Port", 1, 1, lambda model, choices: (model.voltage_tier + 2) * 2),
    ("Reactor Fuel Processing Plant", 1, 1, 1),
    ("Thorium Reactor [LFTR]", 1, 1, 1),
    ("Molecular Transformer", 1, 1, 1),
    ("Industrial Centrifuge", 2.25, 0.9, per_tier(6)),
    ("Industrial Electrolyzer", 2.8, 0.9, per_tier(2)),
    ("Industrial Mixing Machine", 3.5, 1, per_tier(8)),
    ("Nuclear Salt Processing Plant", 2.5, 1, per_tier(2)),
    ("Sparge Tower Controller", 1, 1, 1),
    ("Large Sifter Control Block", 5, 0.75, per_tier(4)),
]

# Every overclock of these machines is perfect.
_PERFECT_MACHINES = [
    ("Circuit Assembly Line", 1),
    ("Component Assembly Line", 1),
    ("Large Chemical Reactor", 1),
    ("Mega Chemical Reactor", 256),
    ("Digester", 1),
    ("Flotation Cell Regulator", 1),
    ("IsaMill Grinding Machine", 1),
]

_INFO_MACHINES = [
    ("Absolute Baryonic Perfection Purification Unit", "Machine not implemented"),
    ("High Energy Laser Purification Unit", "Machine not implemented"),
    ("Source Chamber", "Output energy scales with EU/t up to the point shown in the recipe."),
]


def build_registry() -> MachineRegistry:
    registry = MachineRegistry()
    _register_steam(registry)
    _register_compressors(registry)
    for name, parallels in _PERFECT_MACHINES:
        registry.register(Machine(perfect_overclock=MAX_OVERCLOCK, parallels=parallels), name)
    for name, speed, power, parallels in _PLAIN_MACHINES:
        registry.register(Machine(perfect_overclock=0, speed=speed, power=power, parallels=parallels), name)
    for name, info in _INFO_MACHINES:
        registry.register(Machine(perfect_overclock=0, info=info), name)
    _register_blast_furnaces(registry)
    _register_special(registry)
    _register_space_assemblers(registry)
    _register_fusion(registry)
    registry.freeze()
    logger.info("machine registry built with %d names", len(registry))
    return registry


MACHINES = build_registry()
