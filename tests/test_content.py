from svgdiagram.models import parse_element
from svgdiagram.render.content import (
    HTML_SIZE,
    LIST_SIZE,
    PLACEHOLDER_SIZE,
    TABLE_SIZE,
    NodeContentCompositor,
    table_geometry,
)
from svgdiagram.render.overlays import OverlayRegistry


def _compose(raw: dict, light, overlays=None):
    compositor = NodeContentCompositor(light, overlays if overlays is not None else OverlayRegistry())
    return compositor.compose(parse_element(raw, 0))


def test_table_room_is_derived_from_node_height() -> None:
    geometry = table_geometry(500, 260, ["a", "b"], [], has_title=True)
    assert geometry.visible_rows == 6
    assert geometry.column_width == 240
    assert table_geometry(500, 260, [], [], has_title=False).visible_rows == 7


def test_table_truncates_to_k_rows_plus_indicator(light) -> None:
    k = table_geometry(*TABLE_SIZE, ["n"], [], has_title=True).visible_rows
    rows = [[i] for i in range(k + 3)]
    content = _compose({"id": "t", "title": "T", "columns": ["n"], "rows": rows}, light)

    assert content.markup.count('class="table-row"') == k
    assert content.markup.count('class="table-more"') == 1
    assert "+3 more rows" in content.markup
    assert (content.width, content.height) == TABLE_SIZE


def test_table_without_overflow_has_no_indicator(light) -> None:
    content = _compose({"id": "t", "columns": ["a"], "rows": [["x"], ["y"]]}, light)
    assert content.markup.count('class="table-row"') == 2
    assert "table-more" not in content.markup


def test_table_column_count_and_missing_cells(light) -> None:
    content = _compose({"id": "t", "columns": ["a"], "rows": [["1", "2", "3"], ["only"]]}, light)
    # headers beyond the declared columns are synthesized
    assert "Col 2" in content.markup and "Col 3" in content.markup


def test_table_rows_may_be_mappings(light) -> None:
    content = _compose({"id": "t", "columns": ["name", "age"], "rows": [{"name": "Ada", "age": 36}]}, light)
    assert "Ada" in content.markup and "36" in content.markup


def test_tableau_type_forces_a_table(light) -> None:
    content = _compose({"id": "t", "type": "tableau", "html_content": "<b>ignored</b>"}, light)
    assert "table-header" in content.markup
    assert "ignored" not in content.markup
    assert light.color("tableau") in content.markup


def test_list_items_carry_declarative_interaction(light) -> None:
    overlays = OverlayRegistry()
    raw = {
        "id": "svc",
        "type": "system",
        "title": "Service <1>",
        "content_list": [
            {
                "label": "Things",
                "values": [
                    {"label": "plain"},
                    {"label": "linked", "url": "https://example.com/?a=1&b=2"},
                    {"label": "both", "url": "https://example.com", "modal": {"title": "M", "on": "click"}},
                    {"label": "hover", "modal": {"title": "H", "on": "hover"}},
                ],
            }
        ],
    }
    markup = _compose(raw, light, overlays).markup

    assert 'id="item-svc-0-0" class="diagram-item" style=' in markup
    assert 'data-url="https://example.com/?a=1&amp;b=2"' in markup
    assert 'data-modal="modal-svc-0-2" data-modal-on="click"' in markup
    assert 'data-modal="modal-svc-0-3" data-modal-on="hover"' in markup
    assert "Service &lt;1&gt;" in markup
    assert "svc-0-2" in overlays and "svc-0-3" in overlays
    assert len(overlays) == 2


def test_list_title_icon_and_section_filtering(light) -> None:
    raw = {
        "id": "u",
        "type": "person",
        "title": "Customer",
        "content_list": [
            {"label": "", "values": ["x"]},
            {"label": "Shown", "symbol": "info", "values": ["y"]},
            {"label": "Empty", "values": []},
        ],
    }
    content = _compose(raw, light)
    assert content.markup.count('class="section"') == 1
    assert "Shown" in content.markup and "Empty" not in content.markup
    assert '<circle cx="12" cy="7" r="4"/>' in content.markup
    assert light.color("person") in content.markup
    assert (content.width, content.height) == LIST_SIZE


def test_size_overrides_apply(light) -> None:
    content = _compose({"id": "x", "html_content": "<p>hi</p>", "width": 320, "height": 90}, light)
    assert (content.width, content.height) == (320, 90)
    assert '<foreignObject width="320" height="90">' in content.markup


def test_html_content_is_embedded_verbatim(light) -> None:
    content = _compose({"id": "x", "html_content": "<p class='k'>hi</p>"}, light)
    assert "<p class='k'>hi</p>" in content.markup
    assert (content.width, content.height) == HTML_SIZE


def test_placeholder(light) -> None:
    content = _compose({"id": "x"}, light)
    assert "No content" in content.markup
    assert (content.width, content.height) == PLACEHOLDER_SIZE
