import pytest

from svgdiagram.errors import MalformedRequestError
from svgdiagram.models import parse_document


def test_missing_elements_or_relations_is_malformed() -> None:
    with pytest.raises(MalformedRequestError, match="'elements' and 'relations' are required"):
        parse_document({"elements": []})
    with pytest.raises(MalformedRequestError):
        parse_document({"relations": []})
    with pytest.raises(MalformedRequestError):
        parse_document(["not", "a", "mapping"])


def test_empty_document_is_valid() -> None:
    doc = parse_document({"elements": [], "relations": []})
    assert doc.elements == ()
    assert doc.relations == ()


@pytest.mark.parametrize(
    "elements",
    [
        [{"title": "no id"}],
        [{"id": "a"}, {"id": "a"}],
        ["just a string"],
        [{"id": "a", "width": -10}],
        [{"id": "a", "height": "tall"}],
    ],
)
def test_invalid_elements_are_rejected(elements: list) -> None:
    with pytest.raises(MalformedRequestError):
        parse_document({"elements": elements, "relations": []})


def test_relation_requires_both_endpoints() -> None:
    with pytest.raises(MalformedRequestError, match="'from' and 'to'"):
        parse_document({"elements": [{"id": "a"}], "relations": [{"from": "a"}]})


def test_content_mode_precedence() -> None:
    doc = parse_document(
        {
            "elements": [
                {"id": "l", "content_list": [], "html_content": "<b>x</b>", "columns": ["a"]},
                {"id": "h", "html_content": "<b>x</b>", "rows": [[1]]},
                {"id": "t", "rows": [[1, 2]]},
                {"id": "forced", "type": "tableau", "content_list": [{"label": "s", "values": ["v"]}]},
                {"id": "p"},
            ],
            "relations": [],
        }
    )
    modes = {e.id: e.content_mode for e in doc.elements}
    assert modes == {"l": "list", "h": "html", "t": "table", "forced": "table", "p": "placeholder"}


def test_label_mode_precedence() -> None:
    doc = parse_document(
        {
            "elements": [{"id": "a"}],
            "relations": [
                {"from": "a", "to": "a", "title": "T", "html_label": "<i>h</i>", "label": "x"},
                {"from": "a", "to": "a", "content_list": [{"label": "i"}]},
                {"from": "a", "to": "a", "html_label": "<i>h</i>", "label": "x"},
                {"from": "a", "to": "a", "label": "x"},
                {"from": "a", "to": "a"},
            ],
        }
    )
    assert [r.label_mode for r in doc.relations] == ["structured", "structured", "html", "text", "none"]


def test_groups_are_distinct_in_first_appearance_order() -> None:
    doc = parse_document(
        {
            "elements": [
                {"id": "a", "group": "zeta"},
                {"id": "b"},
                {"id": "c", "group": "alpha"},
                {"id": "d", "group": "zeta"},
                {"id": "e", "group": ""},
            ],
            "relations": [],
        }
    )
    assert doc.groups == ["zeta", "alpha"]
    assert doc.element("c").group == "alpha"
    assert doc.element("missing") is None


def test_modal_trigger_defaults_to_click() -> None:
    doc = parse_document(
        {
            "elements": [
                {
                    "id": "a",
                    "content_list": [
                        {
                            "label": "S",
                            "values": [
                                {"label": "x", "modal": {"title": "m"}},
                                {"label": "y", "modal": {"title": "m", "on": "HOVER"}},
                                {"label": "z", "modal": {"title": "m", "on": "dblclick"}},
                            ],
                        }
                    ],
                }
            ],
            "relations": [],
        }
    )
    values = doc.elements[0].content_list[0].values
    assert [v.modal.on for v in values] == ["click", "hover", "click"]
    assert all(v.is_interactive for v in values)


def test_numeric_overrides_accept_numeric_strings() -> None:
    doc = parse_document({"elements": [{"id": "a", "width": "320", "height": 80.5}], "relations": []})
    assert doc.elements[0].width == 320
    assert doc.elements[0].height == 80.5
