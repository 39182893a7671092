"""Derived indices and effective military strength.

This module handles:
1. Reading pillar/sector values through the active modifier overlay
2. Secondary attributes (rule of law, cohesion, literacy, ...)
3. Recomputing prosperity, stability, innovation, soft power, treasury and
   war exhaustion once per tick
4. Effective army/navy strength used by combat, blockades and trade
"""

from typing import Iterable, Optional

from ..models.attributes import Attribute
from ..models.civilization import Civilization
from ..models.world import WorldState
from ..utils.constants import (
    ARMY_RESOURCE,
    ARMY_UPKEEP,
    COHESION_PENALTY_FROM_CENTRALIZATION,
    INNOVATION_RIGIDITY_PENALTY,
    INNOVATION_WEIGHTS,
    LOW_TOLERANCE_PENALTY,
    LOW_TOLERANCE_THRESHOLD,
    MORALE_FACTOR_RANGE,
    MORALE_FROM_COHESION,
    MORALE_FROM_STABILITY,
    NAVY_RESOURCE,
    PATRONAGE_DRAIN,
    PEACE_PENALTY_PER_EXHAUSTION,
    PROSPERITY_RESOURCE,
    PROSPERITY_WEIGHTS,
    RELIGIOUS_CONFLICT_FACTOR,
    RESOURCE_BONUS,
    SOFT_POWER_WEIGHTS,
    STABILITY_NEGATIVE_WEIGHTS,
    STABILITY_WEIGHTS,
    SUPPLY_FACTOR_RANGE,
    SUPPLY_FROM_HEALTH,
    SUPPLY_FROM_INFRA,
    SUPPLY_FROM_LAW,
    TAX_INCOME_PER_POINT,
    TRADE_TO_TREASURY,
    TREASURE_RESOURCE,
    TREASURY_CAP,
    WAR_EXHAUSTION_DECAY,
    WAR_EXHAUSTION_GROWTH,
    WAR_PENALTY_FLAT,
    WAR_PENALTY_PER_EXHAUSTION,
)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


# ----------------------------------------------------------------------
# Modifier overlay
# ----------------------------------------------------------------------


def modifier_total(world: WorldState, civ_id: str, attribute: Attribute) -> float:
    """Sum of active modifier deltas targeting one attribute of one civ."""
    return sum(
        m.delta
        for m in world.modifiers
        if m.civ_id == civ_id and m.attribute is attribute and m.active_at(world.tick)
    )


def value(world: WorldState, civ: Civilization, attribute: Attribute) -> float:
    """Effective value of a pillar or sector: base plus active deltas, in [0, 100]."""
    base = attribute.read(civ)
    delta = modifier_total(world, civ.id, attribute)
    if not delta:
        return base
    return clamp(base + delta, 0, 100)


# ----------------------------------------------------------------------
# Secondary attributes
# ----------------------------------------------------------------------


def rule_of_law(world: WorldState, civ: Civilization) -> float:
    government = value(world, civ, Attribute.GOVERNMENT)
    infrastructure = value(world, civ, Attribute.INFRASTRUCTURE)
    return clamp(government * 0.7 + infrastructure * 0.2 + 10, 0, 100)


def cohesion(world: WorldState, civ: Civilization) -> float:
    """Raw cohesion minus the penalty from centralization."""
    penalty = COHESION_PENALTY_FROM_CENTRALIZATION * value(world, civ, Attribute.CENTRALIZATION)
    return clamp(value(world, civ, Attribute.COHESION) - penalty, 0, 100)


def literacy(world: WorldState, civ: Civilization) -> float:
    return clamp(value(world, civ, Attribute.KNOWLEDGE) * 0.85 + 8, 0, 100)


def universities(world: WorldState, civ: Civilization) -> float:
    return value(world, civ, Attribute.KNOWLEDGE)


def religious_unity(world: WorldState, civ: Civilization) -> float:
    return value(world, civ, Attribute.RELIGION)


def patronage(world: WorldState, civ: Civilization) -> float:
    return value(world, civ, Attribute.CULTURE)


def cultural_prestige(world: WorldState, civ: Civilization) -> float:
    return value(world, civ, Attribute.CULTURE)


def religious_conflict(world: WorldState, civ: Civilization) -> float:
    conflict = abs(value(world, civ, Attribute.RELIGION) - religious_unity(world, civ))
    conflict *= RELIGIOUS_CONFLICT_FACTOR
    if value(world, civ, Attribute.TOLERANCE) < LOW_TOLERANCE_THRESHOLD:
        conflict += LOW_TOLERANCE_PENALTY
    return conflict


def is_at_war(world: WorldState, civ_id: str) -> bool:
    return any(w.involves(civ_id) for w in world.wars)


# ----------------------------------------------------------------------
# Derived indices
# ----------------------------------------------------------------------


def compute_prosperity(world: WorldState, civ: Civilization, resources: set[str]) -> float:
    pw = PROSPERITY_WEIGHTS
    weighted = (
        pw["agriculture"] * value(world, civ, Attribute.AGRICULTURE)
        + pw["industry"] * value(world, civ, Attribute.INDUSTRY)
        + pw["trade"] * value(world, civ, Attribute.TRADE_OPENNESS)
        + pw["resources"] * value(world, civ, Attribute.RESOURCES)
        + pw["infrastructure"] * value(world, civ, Attribute.INFRASTRUCTURE)
        + pw["law"] * rule_of_law(world, civ)
        + pw["health"] * value(world, civ, Attribute.HEALTH)
    )
    if PROSPERITY_RESOURCE in resources:
        weighted *= 1 + RESOURCE_BONUS[PROSPERITY_RESOURCE]["prosperity"]

    if is_at_war(world, civ.id):
        penalty = WAR_PENALTY_FLAT + civ.war_exhaustion * WAR_PENALTY_PER_EXHAUSTION
    else:
        penalty = civ.war_exhaustion * PEACE_PENALTY_PER_EXHAUSTION

    result = weighted - penalty + modifier_total(world, civ.id, Attribute.PROSPERITY)
    return clamp(result, 0, 100)


def compute_stability(world: WorldState, civ: Civilization) -> float:
    """Stability ("morale"); reads the prosperity computed this tick."""
    sw = STABILITY_WEIGHTS
    nw = STABILITY_NEGATIVE_WEIGHTS
    positives = (
        sw["cohesion"] * cohesion(world, civ)
        + sw["law"] * rule_of_law(world, civ)
        + sw["prosperity"] * civ.prosperity
        + sw["religious_unity"] * religious_unity(world, civ)
        + sw["patronage"] * patronage(world, civ)
    )
    negatives = (
        nw["inequality"] * value(world, civ, Attribute.INEQUALITY)
        + nw["rigidity"] * value(world, civ, Attribute.RIGIDITY)
        + nw["tax"] * value(world, civ, Attribute.TAX_CAPACITY)
        + nw["religious_conflict"] * religious_conflict(world, civ)
        + nw["war_exhaustion"] * civ.war_exhaustion
    )
    result = positives - negatives + modifier_total(world, civ.id, Attribute.STABILITY)
    return clamp(result, 0, 100)


def compute_innovation(world: WorldState, civ: Civilization) -> float:
    iw = INNOVATION_WEIGHTS
    weighted = (
        iw["literacy"] * literacy(world, civ)
        + iw["universities"] * universities(world, civ)
        + iw["media"] * value(world, civ, Attribute.MEDIA)
        + iw["trade"] * value(world, civ, Attribute.TRADE_OPENNESS)
        + iw["urban"] * value(world, civ, Attribute.URBANIZATION)
        + iw["tolerance"] * value(world, civ, Attribute.TOLERANCE)
    )
    result = (
        weighted
        - INNOVATION_RIGIDITY_PENALTY * value(world, civ, Attribute.RIGIDITY)
        + modifier_total(world, civ.id, Attribute.INNOVATION)
    )
    return clamp(result, 0, 100)


def compute_soft_power(world: WorldState, civ: Civilization) -> float:
    spw = SOFT_POWER_WEIGHTS
    result = (
        spw["culture"] * cultural_prestige(world, civ)
        + spw["diplomacy"] * value(world, civ, Attribute.DIPLOMACY)
        + spw["trade"] * value(world, civ, Attribute.TRADE_OPENNESS)
        + spw["law"] * rule_of_law(world, civ)
        + modifier_total(world, civ.id, Attribute.SOFT_POWER)
    )
    return clamp(result, 0, 100)


def treasury_delta(world: WorldState, civ: Civilization, resources: set[str]) -> float:
    """Net treasury change for one tick (income minus drains)."""
    tax_income = (
        value(world, civ, Attribute.TAX_CAPACITY) * 0.01
        * (civ.prosperity / 100)
        * (value(world, civ, Attribute.POPULATION) / 100)
        * TAX_INCOME_PER_POINT
        * 100
    )
    trade_income = civ.last_trade_volume * TRADE_TO_TREASURY
    if TREASURE_RESOURCE in resources:
        tax_income *= 1 + RESOURCE_BONUS[TREASURE_RESOURCE]["treasure"]
        trade_income *= 1 + RESOURCE_BONUS[TREASURE_RESOURCE]["trade"]
    drain = patronage(world, civ) * PATRONAGE_DRAIN
    upkeep = value(world, civ, Attribute.MILITARY) * ARMY_UPKEEP
    return tax_income + trade_income - drain - upkeep


def recalc_derived(world: WorldState) -> None:
    """Recompute every civilization's derived indices, treasury and exhaustion.

    Indices are computed in a fixed order per civilization: prosperity,
    stability (which reads the fresh prosperity), innovation, soft power,
    then the treasury and war-exhaustion drift.
    """
    for civ in world.civilizations:
        resources = world.hex_map.owned_resources(civ.id) if world.hex_map else set()
        at_war = is_at_war(world, civ.id)

        civ.prosperity = compute_prosperity(world, civ, resources)
        civ.stability = compute_stability(world, civ)
        civ.innovation = compute_innovation(world, civ)
        civ.soft_power = compute_soft_power(world, civ)

        civ.treasury = clamp(civ.treasury + treasury_delta(world, civ, resources), 0, TREASURY_CAP)

        drift = WAR_EXHAUSTION_GROWTH if at_war else -WAR_EXHAUSTION_DECAY
        civ.war_exhaustion = clamp(civ.war_exhaustion + drift, 0, 100)


# ----------------------------------------------------------------------
# Military strength
# ----------------------------------------------------------------------


def supply_factor(world: WorldState, civ: Civilization) -> float:
    """Logistics multiplier from infrastructure, rule of law and health."""
    blend = (
        SUPPLY_FROM_INFRA * value(world, civ, Attribute.INFRASTRUCTURE) / 100
        + SUPPLY_FROM_LAW * rule_of_law(world, civ) / 100
        + SUPPLY_FROM_HEALTH * value(world, civ, Attribute.HEALTH) / 100
    )
    return clamp(0.6 + blend * 0.6, *SUPPLY_FACTOR_RANGE)


def morale_factor(world: WorldState, civ: Civilization) -> float:
    """Fighting-spirit multiplier from stability and cohesion."""
    blend = (
        MORALE_FROM_STABILITY * civ.stability / 100
        + MORALE_FROM_COHESION * cohesion(world, civ) / 100
    )
    return clamp(0.6 + blend * 0.6, *MORALE_FACTOR_RANGE)


def _base_strength(world: WorldState, civ: Civilization) -> float:
    return (
        value(world, civ, Attribute.MILITARY)
        * (value(world, civ, Attribute.ECONOMY) / 100)
        * supply_factor(world, civ)
        * morale_factor(world, civ)
    )


def effective_army(
    world: WorldState, civ: Civilization, resources: Optional[Iterable[str]] = None
) -> float:
    """Normalized land strength, boosted when the civ holds the army resource.

    Args:
        world: Current world state
        civ: Civilization to evaluate
        resources: Pre-computed owned resource types (looked up when omitted)
    """
    if resources is None:
        resources = world.hex_map.owned_resources(civ.id)
    strength = _base_strength(world, civ)
    if ARMY_RESOURCE in resources:
        strength *= 1 + RESOURCE_BONUS[ARMY_RESOURCE]["army"]
    return strength / 100


def effective_navy(
    world: WorldState, civ: Civilization, resources: Optional[Iterable[str]] = None
) -> float:
    """Normalized naval strength, boosted when the civ holds the navy resource."""
    if resources is None:
        resources = world.hex_map.owned_resources(civ.id)
    strength = _base_strength(world, civ)
    if NAVY_RESOURCE in resources:
        strength *= 1 + RESOURCE_BONUS[NAVY_RESOURCE]["navy"]
    return strength / 100


def army_snapshot(world: WorldState) -> dict[str, float]:
    """Effective army of every civilization, frozen for one sub-operation."""
    return {civ.id: effective_army(world, civ) for civ in world.civilizations}


def navy_snapshot(world: WorldState) -> dict[str, float]:
    """Effective navy of every civilization, frozen for one sub-operation."""
    return {civ.id: effective_navy(world, civ) for civ in world.civilizations}
