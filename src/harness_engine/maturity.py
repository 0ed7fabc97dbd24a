"""Maturity Resolver - maps a 0-18 total score onto five ordered levels."""

# (inclusive upper bound, label), checked in order
MATURITY_LEVELS: tuple[tuple[int, str], ...] = (
    (4, "L0: Manual"),
    (8, "L1: Assisted"),
    (13, "L2: Steered"),
    (16, "L3: Autonomous"),
)
TERMINAL_LEVEL = "L4: Self-Correcting"
LEVEL_LABELS: tuple[str, ...] = tuple(label for _, label in MATURITY_LEVELS) + (TERMINAL_LEVEL,)


def resolve_maturity_level(total_score: int) -> str:
    """
    Resolve the maturity label for a total score.

    Args:
        total_score: Sum of all dimension scores

    Returns:
        Level label such as "L2: Steered"
    """
    for upper_bound, label in MATURITY_LEVELS:
        if total_score <= upper_bound:
            return label
    return TERMINAL_LEVEL


def resolve_level_key(maturity_level: str) -> str:
    """Short key ("L0".."L4") for a level label."""
    return maturity_level.split(":", 1)[0].strip()


def level_index(maturity_level: str) -> int:
    """Ordinal of a level label or key, 0 for L0."""
    key = resolve_level_key(maturity_level)
    return int(key[1:])
