"""World presets: starting civilizations, alliances and flavor per scenario."""

from dataclasses import dataclass, field

from ..models.civilization import Civilization, Pillars, Sectors


class WorldConfigError(ValueError):
    """Raised when a world cannot be built from the given configuration."""


# Pillar order: religion, government, economy, knowledge, culture, social,
# tolerance, church_state, media, cohesion, rigidity, inequality, centralization
PILLAR_FIELDS = (
    "religion", "government", "economy", "knowledge", "culture", "social",
    "tolerance", "church_state", "media", "cohesion", "rigidity", "inequality",
    "centralization",
)
# Sector order: population, urbanization, infrastructure, health, military,
# aggression, diplomacy, resources, trade_openness, tax_capacity
SECTOR_FIELDS = (
    "population", "urbanization", "infrastructure", "health", "military",
    "aggression", "diplomacy", "resources", "trade_openness", "tax_capacity",
)


@dataclass
class CivTemplate:
    """Starting profile of one civilization."""

    id: str
    name: str
    color: str
    motto: str
    religion_name: str
    government_name: str
    pillars: tuple
    sectors: tuple


@dataclass
class Preset:
    """A scenario: civilizations, alliances and pressure settings."""

    id: str
    outer_pressure_name: str
    external_pressure: float
    event_intensity: float
    civs: list[CivTemplate]
    alliances: list[tuple[str, str]] = field(default_factory=list)


PRESETS: dict[str, Preset] = {
    "tess": Preset(
        id="tess",
        outer_pressure_name="Outer Shoals",
        external_pressure=25,
        event_intensity=50,
        civs=[
            CivTemplate("SAL", "The Salanic Empire", "#4FA3FF",
                        "Iron fist, iron will, iron legacy.", "Imperial Cult", "Iron-fisted Monarchy",
                        (75, 90, 70, 85, 60, 70, 40, 80, 45, 75, 85, 70, 90),
                        (60, 65, 75, 65, 85, 70, 60, 75, 55, 80)),
            CivTemplate("LYR", "Kingdom of Lyrica", "#FF6E6E",
                        "Faith and harmony, piety and order.", "Divine Kingship", "Theocratic Monarchy",
                        (95, 80, 65, 55, 85, 75, 30, 95, 40, 85, 80, 75, 75),
                        (55, 60, 65, 60, 70, 60, 65, 65, 50, 70)),
            CivTemplate("THO", "Republic of Thornwall", "#7AD37A",
                        "Commerce and discovery, innovation and liberty.", "Rational Humanism",
                        "Merchant Council Republic",
                        (40, 70, 85, 80, 70, 60, 75, 25, 80, 65, 45, 55, 60),
                        (50, 80, 80, 70, 60, 75, 80, 70, 90, 65)),
            CivTemplate("KHA", "Khaldur Nomad Clans", "#FFD166",
                        "Clan loyalty, warrior honor, tribal strength.", "Shamanistic Animism",
                        "Tribal Confederation",
                        (60, 45, 50, 35, 55, 85, 50, 40, 30, 90, 70, 60, 40),
                        (45, 35, 45, 50, 80, 45, 55, 60, 40, 45)),
            CivTemplate("GLA", "Glass League", "#B66DFF",
                        "By lattice and ledger, all harbors prosper.", "Lattice of Saints", "Merchant Council",
                        (45, 65, 85, 80, 70, 45, 65, 35, 70, 60, 45, 40, 65),
                        (52, 78, 72, 68, 70, 90, 80, 70, 85, 55)),
        ],
    ),
    "we1914": Preset(
        id="we1914",
        outer_pressure_name="Germany (Pressure)",
        external_pressure=40,
        event_intensity=50,
        civs=[
            CivTemplate("FRA", "France", "#2fa4ff", "Honor and patrie.", "Laïcité", "Republic",
                        (40, 70, 75, 75, 80, 55, 70, 20, 75, 60, 50, 52, 70),
                        (40, 70, 78, 68, 90, 60, 80, 65, 70, 60)),
            CivTemplate("UK", "United Kingdom", "#ff2f2f", "Rule the waves.", "Anglican pluralism",
                        "Constitutional Monarchy",
                        (60, 80, 85, 80, 75, 60, 75, 35, 85, 62, 52, 60, 75),
                        (45, 82, 82, 70, 65, 100, 85, 60, 85, 62)),
            CivTemplate("BEL", "Belgium", "#ffd166", "Firm and faithful.", "Catholic", "Monarchy",
                        (70, 65, 70, 65, 60, 55, 60, 55, 65, 58, 50, 55, 65),
                        (10, 76, 75, 65, 45, 30, 60, 45, 80, 58)),
            CivTemplate("NED", "Netherlands", "#7AD37A", "I will persevere.", "Protestant pluralism",
                        "Monarchy",
                        (55, 70, 80, 75, 65, 55, 78, 30, 80, 60, 50, 52, 65),
                        (9, 78, 78, 68, 35, 70, 75, 50, 90, 60)),
            CivTemplate("ESP", "Spain", "#B66DFF", "Plus Ultra.", "Catholic", "Monarchy",
                        (75, 60, 60, 55, 70, 60, 55, 70, 60, 62, 58, 60, 62),
                        (20, 55, 60, 60, 55, 55, 60, 55, 70, 55)),
            CivTemplate("PRT", "Portugal", "#4FA3FF", "Talant de bien faire.", "Catholic", "Monarchy",
                        (70, 55, 55, 55, 60, 55, 60, 60, 60, 58, 56, 58, 58),
                        (8, 52, 58, 58, 35, 60, 65, 50, 80, 55)),
        ],
        alliances=[("FRA", "UK"), ("FRA", "BEL"), ("UK", "NED")],
    ),
    "bac1200": Preset(
        id="bac1200",
        outer_pressure_name="Sea Peoples (Pressure)",
        external_pressure=50,
        event_intensity=55,
        civs=[
            CivTemplate("EGY", "Egypt", "#ffd166", "Life, Prosperity, Health.", "State temples",
                        "Pharaonic state",
                        (85, 80, 70, 75, 80, 70, 55, 85, 50, 70, 68, 60, 82),
                        (30, 55, 75, 60, 70, 40, 70, 70, 65, 68)),
            CivTemplate("HAT", "Hatti", "#ff6e6e", "Land of a thousand gods.", "Polytheism", "Kingship",
                        (80, 70, 65, 60, 70, 65, 50, 75, 45, 68, 64, 58, 70),
                        (20, 50, 60, 55, 80, 35, 65, 75, 55, 60)),
            CivTemplate("MYC", "Mycenaeans", "#4FA3FF", "Lion-gate proud.", "Aegean cults", "Palace economy",
                        (70, 65, 65, 55, 70, 60, 55, 60, 45, 62, 58, 56, 62),
                        (9, 48, 55, 55, 65, 60, 60, 55, 70, 55)),
            CivTemplate("UGA", "Ugarit", "#B66DFF", "Write, weigh, and sail.", "Levantine cults", "City-king",
                        (60, 65, 75, 80, 75, 55, 65, 45, 70, 58, 50, 52, 60),
                        (7, 70, 60, 55, 35, 50, 80, 45, 85, 58)),
            CivTemplate("ASS", "Assyria", "#7AD37A", "Who dares defy the king?", "Ashur cult", "Kingship",
                        (80, 80, 70, 65, 60, 70, 45, 80, 45, 68, 66, 60, 80),
                        (18, 48, 65, 55, 85, 30, 55, 75, 50, 65)),
        ],
        alliances=[("EGY", "UGA")],
    ),
}


def get_preset(preset_id: str) -> Preset:
    """Look up a preset.

    Raises:
        WorldConfigError: If the preset id is unknown
    """
    try:
        return PRESETS[preset_id]
    except KeyError:
        raise WorldConfigError(
            f"Unknown preset: {preset_id!r} (expected one of {sorted(PRESETS)})"
        ) from None


def build_civilizations(preset: Preset) -> list[Civilization]:
    """Instantiate fresh civilizations for a preset, in preset order."""
    civs = []
    for template in preset.civs:
        civs.append(
            Civilization(
                id=template.id,
                name=template.name,
                color=template.color,
                motto=template.motto,
                religion_name=template.religion_name,
                government_name=template.government_name,
                pillars=Pillars(**dict(zip(PILLAR_FIELDS, template.pillars))),
                sectors=Sectors(**dict(zip(SECTOR_FIELDS, template.sectors))),
                external_pressure=preset.external_pressure,
                event_intensity=preset.event_intensity,
            )
        )
    return civs
