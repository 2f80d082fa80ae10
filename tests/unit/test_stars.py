from constellation.domain.models import StarType
from constellation.services.graph.stars import authored_star_type, investment_star_type, proficiency_star_type, star_size


def test_authored_star_type_thresholds():
    assert authored_star_type(1) == StarType.DWARF
    assert authored_star_type(2) == StarType.MAIN_SEQUENCE
    assert authored_star_type(3) == StarType.GIANT
    assert authored_star_type(5) == StarType.SUPERGIANT

def test_investment_star_type_uses_ratio():
    assert investment_star_type(0, 5) == StarType.DWARF
    assert investment_star_type(2, 5) == StarType.MAIN_SEQUENCE
    assert investment_star_type(3, 5) == StarType.GIANT
    assert investment_star_type(4, 5) == StarType.SUPERGIANT

def test_proficiency_mapping():
    assert proficiency_star_type(1) == StarType.DWARF
    assert proficiency_star_type(3) == StarType.MAIN_SEQUENCE
    assert proficiency_star_type(5) == StarType.SUPERGIANT
    assert proficiency_star_type(None) == StarType.MAIN_SEQUENCE

def test_star_size_scales_only_in_admin_mode():
    assert star_size(StarType.GIANT) == 40
    assert star_size(StarType.DWARF, node_scale=1.5) == 36
    assert star_size(StarType.SUPERGIANT, node_scale=2.0, admin_mode=False) == 36
