from constellation.core.math import star_ratio
from constellation.domain.models import StarType

STAR_BASE_SIZE = {
    StarType.SUPERGIANT: 48,
    StarType.GIANT: 40,
    StarType.MAIN_SEQUENCE: 32,
    StarType.DWARF: 24,
}
LEARNER_STAR_SIZE = 36


def authored_star_type(level: int | None) -> StarType:
    """Authoring-time default, thresholded on the skill's difficulty tier."""
    lvl = level or 1
    if lvl >= 5:
        return StarType.SUPERGIANT
    if lvl >= 3:
        return StarType.GIANT
    if lvl >= 2:
        return StarType.MAIN_SEQUENCE
    return StarType.DWARF


def investment_star_type(current_level: int, max_level: int) -> StarType:
    ratio = star_ratio(current_level, max_level)
    if ratio >= 0.8:
        return StarType.SUPERGIANT
    if ratio >= 0.6:
        return StarType.GIANT
    if ratio >= 0.3:
        return StarType.MAIN_SEQUENCE
    return StarType.DWARF


def proficiency_star_type(proficiency: int | None) -> StarType:
    # mapping used when skills are imported from a career's skill list
    if proficiency in (1, 2):
        return StarType.DWARF
    if proficiency == 4:
        return StarType.GIANT
    if proficiency == 5:
        return StarType.SUPERGIANT
    return StarType.MAIN_SEQUENCE


def star_size(star_type: StarType, node_scale: float = 1.0, admin_mode: bool = True) -> int:
    if not admin_mode:
        return LEARNER_STAR_SIZE
    return round(STAR_BASE_SIZE.get(star_type, 32) * (node_scale or 1.0))
