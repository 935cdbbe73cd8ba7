import pytest

from svgdiagram.icons import ICONS, icon_svg, infer_element_icon, infer_group_icon, match_icon
from svgdiagram.theme import DEFAULT_CONFIG, THEMES, normalize_rank_direction, resolve_palette


def test_unknown_palette_falls_back_to_light() -> None:
    assert resolve_palette("purple") is THEMES["light"]
    assert resolve_palette(None) is THEMES["light"]
    assert resolve_palette(" Dark ") is THEMES["dark"]


def test_palette_color_falls_back_to_default_key() -> None:
    light = THEMES["light"]
    assert light.color("person") == "#e0f2fe"
    assert light.color("no-such-type") == light["default"]
    assert light.color(None) == light["default"]


def test_palettes_share_the_same_keys() -> None:
    assert set(THEMES["light"].colors) == set(THEMES["dark"].colors)


def test_render_config_is_frozen() -> None:
    import dataclasses

    import pytest

    with pytest.raises(dataclasses.FrozenInstanceError):
        DEFAULT_CONFIG.margin = 0  # type: ignore[misc]


def test_rank_direction_normalization() -> None:
    assert normalize_rank_direction("lr") == "LR"
    assert normalize_rank_direction("sideways") == "TB"
    assert normalize_rank_direction(None, "BT") == "BT"


def test_element_icon_prefers_tags_over_type() -> None:
    assert infer_element_icon(["db"], "person") == "database"
    assert infer_element_icon([], "person") == "user"
    assert infer_element_icon(["unrelated"], "system") is None


def test_table_order_decides_between_families() -> None:
    # "user" precedes "database" in the keyword table
    assert match_icon(["data", "user"]) == "user"


def test_group_icon_matches_substrings() -> None:
    assert infer_group_icon("Backend services") == "api"
    assert infer_group_icon("Utilisateurs finaux") == "user"
    assert infer_group_icon("Misc") is None
    assert infer_group_icon(None) is None


def test_icon_svg_resizes_and_ignores_unknown_keys() -> None:
    resized = icon_svg("database", 18)
    assert 'width="18"' in resized and 'height="18"' in resized
    assert 'width="16"' in ICONS["database"]
    assert icon_svg("nope") == ""
    assert icon_svg(None) == ""


@pytest.mark.parametrize("element_type", ["info", "module", "package", "humain", "donnée"])
def test_group_only_keywords_do_not_decorate_nodes(element_type: str) -> None:
    assert infer_element_icon([], element_type) is None
    assert infer_element_icon([element_type], None) is None


def test_node_only_families_do_not_decorate_clusters() -> None:
    assert infer_element_icon([], "new") == "new"
    assert infer_group_icon("Address book") is None
    assert infer_group_icon("Shared modules") == "module"
    assert infer_group_icon("Données client") == "database"
