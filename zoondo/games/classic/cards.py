"""
Classic tribes - Card definitions for the two starter tribes.

Card structure:
- Movement pattern (paths of offsets, first player's point of view)
- Corners (4 values clockwise from top-left, "*" triggers the power)
- Power name (resolved by a plugin when one is registered)
"""

from ...engine_core.catalog import CardDefinition, TribeDefinition
from ...engine_core.geometry import DIAGONAL, ORTHOGONAL, rays
from ...engine_core.state import EMBLEMS, FIGHTERS, WILDCARD


ASHEN = "ashen"
TIDAL = "tidal"

# Jump two cells in a straight line, passing over the first one
LEAP_TWO = [
    [(0, 1, True), (0, 2)],
    [(1, 0, True), (2, 0)],
    [(0, -1, True), (0, -2)],
    [(-1, 0, True), (-2, 0)],
]

FORWARD_LINE = [[(0, 1), (0, 2), (0, 3)]]
KING = rays(ORTHOGONAL + DIAGONAL, 1)


def fighter(tribe: str, slug: str, name: str, moves, corners, power: str | None = None) -> CardDefinition:
    return CardDefinition(
        tribe=tribe,
        type=FIGHTERS,
        slug=slug,
        name=name,
        moves=moves,
        corners=tuple(corners),
        power=power,
    )


def emblem(tribe: str, slug: str, name: str, corners) -> CardDefinition:
    return CardDefinition(
        tribe=tribe,
        type=EMBLEMS,
        slug=slug,
        name=name,
        moves=rays(ORTHOGONAL, 1),
        corners=tuple(corners),
    )


# ============================================================================
# Ashen Clan
# ============================================================================

ASHEN_TRIBE = TribeDefinition(
    slug=ASHEN,
    name="Ashen Clan",
    fighters=[
        fighter(ASHEN, "ember-scout", "Ember Scout", rays(ORTHOGONAL, 2), (2, 1, 2, 1)),
        fighter(ASHEN, "cinder-guard", "Cinder Guard", rays(ORTHOGONAL, 1), (3, 3, 2, 2)),
        fighter(ASHEN, "ash-wolf", "Ash Wolf", LEAP_TWO, (4, 1, WILDCARD, 1), power="Swap"),
        fighter(ASHEN, "soot-viper", "Soot Viper", rays(DIAGONAL, 1), (WILDCARD, 2, 1, 3), power="Venom"),
        fighter(ASHEN, "kiln-giant", "Kiln Giant", KING, (5, 2, 4, 2)),
        fighter(ASHEN, "smoke-dancer", "Smoke Dancer", rays(DIAGONAL, 3), (1, 3, 1, WILDCARD), power="Leap"),
        fighter(ASHEN, "flare-archer", "Flare Archer", FORWARD_LINE, (3, 2, 1, 2)),
        fighter(ASHEN, "char-monk", "Char Monk", rays(ORTHOGONAL, 1), (2, WILDCARD, 2, 2), power="Meditation"),
    ],
    emblem=emblem(ASHEN, "ashen-totem", "Ashen Totem", (2, 0, 2, 0)),
    disposition=[
        [None, "ember-scout", "ashen-totem", "flare-archer", None, None],
        ["ash-wolf", None, "cinder-guard", None, "soot-viper", None],
        [None, "smoke-dancer", None, "kiln-giant", None, "char-monk"],
    ],
)


# ============================================================================
# Tidal Court
# ============================================================================

TIDAL_TRIBE = TribeDefinition(
    slug=TIDAL,
    name="Tidal Court",
    fighters=[
        fighter(TIDAL, "reef-runner", "Reef Runner", rays(ORTHOGONAL, 2), (1, 2, 1, 2)),
        fighter(TIDAL, "shell-guard", "Shell Guard", rays(ORTHOGONAL, 1), (3, 2, 3, 2)),
        fighter(TIDAL, "moray", "Moray", LEAP_TWO, (WILDCARD, 1, 4, 1), power="Swap"),
        fighter(TIDAL, "jellyfish", "Jellyfish", rays(DIAGONAL, 1), (2, WILDCARD, 3, 1), power="Venom"),
        fighter(TIDAL, "kraken", "Kraken", KING, (4, 3, 4, 1)),
        fighter(TIDAL, "heron", "Heron", rays(DIAGONAL, 3), (3, 1, WILDCARD, 1), power="Leap"),
        fighter(TIDAL, "spear-fisher", "Spear Fisher", FORWARD_LINE, (2, 2, 3, 1)),
        fighter(TIDAL, "tide-sage", "Tide Sage", rays(ORTHOGONAL, 1), (2, 2, 2, WILDCARD), power="Undertow"),
    ],
    emblem=emblem(TIDAL, "tidal-pearl", "Tidal Pearl", (0, 2, 0, 2)),
    disposition=[
        [None, "reef-runner", "tidal-pearl", "spear-fisher", None, None],
        ["moray", None, "shell-guard", None, "jellyfish", None],
        [None, "heron", None, "kraken", None, "tide-sage"],
    ],
)


TRIBES = [ASHEN_TRIBE, TIDAL_TRIBE]
