from dataclasses import dataclass


@dataclass(frozen=True)
class VoltageTier:
    name: str
    voltage: int


VOLTAGE_TIERS = [
    VoltageTier("ULV", 8),
    VoltageTier("LV", 32),
    VoltageTier("MV", 128),
    VoltageTier("HV", 512),
    VoltageTier("EV", 2048),
    VoltageTier("IV", 8192),
    VoltageTier("LuV", 32768),
    VoltageTier("ZPM", 131072),
    VoltageTier("UV", 524288),
    VoltageTier("UHV", 2097152),
    VoltageTier("UEV", 8388608),
    VoltageTier("UIV", 33554432),
    VoltageTier("UMV", 134217728),
    VoltageTier("UXV", 536870912),
    VoltageTier("MAX", 2147483648),
]

TIER_ULV = 0
TIER_LV = 1
TIER_MV = 2
TIER_HV = 3
TIER_EV = 4
TIER_IV = 5
TIER_LUV = 6
TIER_ZPM = 7
TIER_UV = 8
TIER_UHV = 9
TIER_UEV = 10
TIER_UIV = 11
TIER_UMV = 12
TIER_UXV = 13
TIER_MAX = 14

COIL_TIER_NAMES = [
    "Cupronickel",
    "Kanthal",
    "Nichrome",
    "TPV",
    "HSS-G",
    "HSS-S",
    "Naquadah",
    "Naquadah Alloy",
    "Trinium",
    "Electrum Flux",
    "Awakened Draconium",
    "Infinity",
    "Hypogen",
    "Eternal",
]

# Upper startup-energy bound for fusion tiers 1..4; anything above is tier 5.
_FUSION_STARTUP_LIMITS = [160_000_000, 320_000_000, 640_000_000, 5_120_000_000]


def _clamp_tier(tier: int) -> int:
    return max(0, min(len(VOLTAGE_TIERS) - 1, int(tier)))


def voltage_of(tier: int) -> int:
    return VOLTAGE_TIERS[_clamp_tier(tier)].voltage


def tier_name(tier: int) -> str:
    return VOLTAGE_TIERS[_clamp_tier(tier)].name


def fusion_tier_by_startup_cost(cost: float) -> int:
    for tier, limit in enumerate(_FUSION_STARTUP_LIMITS, start=1):
        if cost <= limit:
            return tier
    return len(_FUSION_STARTUP_LIMITS) + 1
