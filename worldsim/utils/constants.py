"""Simulation balance constants."""

# Grid dimensions (odd-r offset hex layout)
GRID_W = 42
GRID_H = 28

# Presets
DEFAULT_PRESET = "tess"
PRESET_IDS = ("tess", "we1914", "bac1200")
DEFAULT_SEED_TEXT = "719-SUNDER"

# Resources
RESOURCE_TYPES = ("Grain", "Ironwood", "Auric Salts", "Sky-Amber")
RESOURCES_PER_TYPE = 6
RESOURCE_PLACEMENT_ATTEMPTS = 50  # Per resource to place, before deterministic fallback
ARMY_RESOURCE = "Ironwood"
NAVY_RESOURCE = "Sky-Amber"
PROSPERITY_RESOURCE = "Grain"
TREASURE_RESOURCE = "Auric Salts"
RESOURCE_BONUS = {
    "Grain": {"prosperity": 0.10},
    "Ironwood": {"army": 0.12},
    "Auric Salts": {"treasure": 0.12, "trade": 0.08},
    "Sky-Amber": {"navy": 0.10},
}

# Capital placement
CAPITAL_MIN_SPACING = 7
CAPITAL_PLACEMENT_TRIES = 500
EXPANSION_PASSES = 10
EXPANSION_CHANCE = 0.2

# Randomness
BASE_RANDOMNESS = 0.20
BATTLE_SWING = 0.15
TRADE_VARIANCE = 0.08

# Economy
BASE_TREASURY = 300.0
TREASURY_CAP = 9999.0
PROSPERITY_WEIGHTS = {
    "agriculture": 0.22,
    "industry": 0.20,
    "trade": 0.22,
    "resources": 0.10,
    "infrastructure": 0.12,
    "law": 0.07,
    "health": 0.07,
}
TAX_INCOME_PER_POINT = 0.18
TRADE_TO_TREASURY = 0.5
PATRONAGE_DRAIN = 0.03
ARMY_UPKEEP = 0.005
WAR_PENALTY_FLAT = 10.0
WAR_PENALTY_PER_EXHAUSTION = 0.6
PEACE_PENALTY_PER_EXHAUSTION = 0.3

# Stability ("morale")
STABILITY_WEIGHTS = {
    "cohesion": 0.25,
    "law": 0.18,
    "prosperity": 0.20,
    "religious_unity": 0.10,
    "patronage": 0.07,
}
STABILITY_NEGATIVE_WEIGHTS = {
    "inequality": 0.14,
    "rigidity": 0.08,
    "tax": 0.06,
    "religious_conflict": 0.10,
    "war_exhaustion": 0.18,
}
COHESION_PENALTY_FROM_CENTRALIZATION = 0.12
RELIGIOUS_CONFLICT_FACTOR = 0.05
LOW_TOLERANCE_THRESHOLD = 40
LOW_TOLERANCE_PENALTY = 8.0

# Innovation
INNOVATION_WEIGHTS = {
    "literacy": 0.25,
    "universities": 0.28,
    "media": 0.15,
    "trade": 0.10,
    "urban": 0.12,
    "tolerance": 0.10,
}
INNOVATION_RIGIDITY_PENALTY = 0.25

# Soft power
SOFT_POWER_WEIGHTS = {"culture": 0.40, "diplomacy": 0.35, "trade": 0.15, "law": 0.10}

# War exhaustion
WAR_EXHAUSTION_GROWTH = 0.35
WAR_EXHAUSTION_DECAY = 0.25
CAPTURE_EXHAUSTION_WINNER = 1.5
CAPTURE_EXHAUSTION_LOSER = 2.0

# Military
SUPPLY_FROM_INFRA = 0.6
SUPPLY_FROM_LAW = 0.3
SUPPLY_FROM_HEALTH = 0.1
SUPPLY_FACTOR_RANGE = (0.3, 1.6)
MORALE_FROM_STABILITY = 0.65
MORALE_FROM_COHESION = 0.35
MORALE_FACTOR_RANGE = (0.5, 1.8)
BASE_FLIP_CHANCE = 0.08
FLIP_RATIO_RANGE = (0.2, 5.0)

# Colonization
COLONIZE_TICKS = 220
COLONIZE_COST = 60.0
COLONIZE_ARMY_REQ = 40
COLONIZE_PROSPERITY_REQ = 55
COLONIZE_STABILITY_REQ = 55
COLONIZE_LAUNCH_CHANCE = 0.02
RESOURCE_DISCOVERY_CHANCE = 0.4

# Trade
MIN_ROUTE_LEN = 4
CONVOYS_PER_ROUTE = 18
CONVOY_ADVANCE_PER_TICK = 0.02
SEA_BONUS_FROM_NAVY = 0.5
LAND_BONUS_FROM_INFRA = 0.5
BLOCKADE_MARGIN = 1.15
BLOCKADE_PENALTY = 0.60
BLOCKED_VOLUME_SHARE = 0.2
THROUGHPUT_CAP = 1.8
DEFAULT_PARTNER_VALUE = 60.0  # Stand-in for an unowned route endpoint

# Raids
RAIDER_STRIKE_EVERY = 120
PRESSURE_TO_RAID = 0.35
RAID_BLOCK_TICKS = 30

# Diplomacy
ALLY_PRESSURE_THRESHOLD = 65
ALLIANCE_CHECK_EVERY = 20
ALLIANCE_GUARANTEE = True
TRUCE_TICKS = 90

# Events
EVENT_BASE_CHANCE = 0.001
EVENT_BASE_COOLDOWN = 40
EVENT_CATEGORY_WEIGHTS = {
    "economy": 1.2,
    "religion": 1.0,
    "war": 1.0,
    "culture": 1.0,
    "knowledge": 1.0,
    "government": 0.8,
    "outer": 1.2,
    "diplomacy": 1.0,
}
INCURSION_PRESSURE_SCALE = 50  # Average pressure at which outer events draw at their category weight
DEFAULT_EVENT_INTENSITY = 50

# Reporting
SUMMARY_EVERY = 3
EVENT_LOG_LIMIT = 200
