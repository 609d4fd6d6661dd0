"""Body definitions, presets, and sign arithmetic."""

from __future__ import annotations

import math
from dataclasses import dataclass

from astrostatus.schemas.events import SignPosition

# Celestial body IDs for pyswisseph
# These map to swisseph constants
BODY_IDS: dict[str, int] = {
    "sun": 0,  # SE_SUN
    "moon": 1,  # SE_MOON
    "mercury": 2,  # SE_MERCURY
    "venus": 3,  # SE_VENUS
    "mars": 4,  # SE_MARS
    "jupiter": 5,  # SE_JUPITER
    "saturn": 6,  # SE_SATURN
    "uranus": 7,  # SE_URANUS
    "neptune": 8,  # SE_NEPTUNE
    "pluto": 9,  # SE_PLUTO
    "mean_node": 10,  # SE_MEAN_NODE
    "north_node": 11,  # SE_TRUE_NODE (true node, not mean)
}


@dataclass(frozen=True)
class Body:
    """A tracked body.

    ``retrograde_notice`` is the number of days ahead a station is announced;
    ``None`` for bodies that are not tracked for retrograde motion.
    """

    key: str
    name: str
    category: str
    retrograde_notice: int | None = None

    @property
    def id(self) -> int:
        return BODY_IDS[self.key]


BODIES: tuple[Body, ...] = (
    Body("sun", "Sun", "luminary"),
    Body("moon", "Moon", "luminary"),
    Body("mercury", "Mercury", "personal", 10),
    Body("venus", "Venus", "personal", 10),
    Body("mars", "Mars", "personal", 10),
    Body("jupiter", "Jupiter", "social", 14),
    Body("saturn", "Saturn", "social", 14),
    Body("uranus", "Uranus", "transpersonal", 14),
    Body("neptune", "Neptune", "transpersonal", 14),
    Body("pluto", "Pluto", "transpersonal", 14),
    Body("mean_node", "Mean Node", "node"),
    Body("north_node", "North Node", "node"),
)

_BODIES_BY_KEY = {b.key: b for b in BODIES}

# Presets select which bodies a calculation looks at
TRADITIONAL_BODIES = tuple(b for b in BODIES if b.category in ("luminary", "personal", "social"))
MODERN_BODIES = tuple(
    b for b in BODIES if b.category in ("luminary", "personal", "social", "transpersonal")
)
RETROGRADE_TARGETS = tuple(b for b in BODIES if b.retrograde_notice is not None)
VOID_ASPECT_TARGETS_TRADITIONAL = tuple(b for b in TRADITIONAL_BODIES if b.key != "moon")
VOID_ASPECT_TARGETS_MODERN = tuple(b for b in MODERN_BODIES if b.key != "moon")

# Coarse scan step (days) by category: faster bodies need finer steps
DEFAULT_STEP_DAYS: dict[str, float] = {
    "personal": 0.5,
    "social": 1.0,
    "transpersonal": 2.0,
}

# Zodiac signs in order
SIGNS = (
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
)


def get_body(key: str | Body) -> Body:
    """Look up a body by key. Raises KeyError for unknown bodies."""
    if isinstance(key, Body):
        return key
    return _BODIES_BY_KEY[key.lower()]


def default_step_days(body: Body) -> float:
    """Coarse scan step for a body's category."""
    return DEFAULT_STEP_DAYS.get(body.category, 1.0)


def normalize(longitude: float) -> float:
    """Map any longitude into [0, 360)."""
    lon = math.fmod(math.fmod(longitude, 360.0) + 360.0, 360.0)
    # fmod of a tiny negative value can round up to exactly 360.0
    return 0.0 if lon >= 360.0 else lon


def wrap180(angle: float) -> float:
    """Map an angle difference into [-180, 180]."""
    diff = normalize(angle)
    return diff - 360.0 if diff > 180.0 else diff


def sign_index(longitude: float) -> int:
    """Sign index 0-11 (0 = Aries) for a longitude."""
    return min(int(normalize(longitude) // 30.0), 11)


def degree_in_sign(longitude: float) -> float:
    """Degree within the sign, in [0, 30)."""
    return normalize(longitude) - sign_index(longitude) * 30.0


def sign_name(index: int) -> str:
    return SIGNS[index % 12]


def longitude_to_sign(longitude: float) -> tuple[str, float]:
    """Convert ecliptic longitude to sign and degree within sign."""
    return SIGNS[sign_index(longitude)], degree_in_sign(longitude)


def sign_position(longitude: float) -> SignPosition:
    return SignPosition(sign_index=sign_index(longitude), degree_in_sign=degree_in_sign(longitude))
