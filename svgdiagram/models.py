"""Data models for diagram documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from .errors import MalformedRequestError

ModalTrigger = Literal["hover", "click"]
ContentMode = Literal["list", "html", "table", "placeholder"]


@dataclass(frozen=True)
class Modal:
    """An overlay panel attached to a list item."""

    title: str = ""
    subtitle: str = ""
    html_content: str = ""
    on: ModalTrigger = "click"


@dataclass(frozen=True)
class ListItem:
    label: str
    subtitle: str | None = None
    symbol: str | None = None
    url: str | None = None
    modal: Modal | None = None

    @property
    def is_interactive(self) -> bool:
        return bool(self.url) or self.modal is not None


@dataclass(frozen=True)
class Section:
    label: str
    symbol: str | None = None
    values: tuple[ListItem, ...] = ()

    @property
    def renderable(self) -> bool:
        return bool(self.label) and bool(self.values)


@dataclass(frozen=True)
class LabelItem:
    """One line of a structured relation label."""

    label: str
    symbol: str | None = None


@dataclass(frozen=True)
class Element:
    """A renderable node: identity, visual type and content."""

    id: str
    type: str = "default"
    title: str | None = None
    subtitle: str | None = None
    group: str | None = None
    width: float | None = None
    height: float | None = None
    shape: Mapping[str, Any] | None = None
    tags: tuple[str, ...] = ()
    content_list: tuple[Section, ...] | None = None
    html_content: str | None = None
    columns: tuple[Any, ...] | None = None
    rows: tuple[Any, ...] | None = None

    @property
    def content_mode(self) -> ContentMode:
        """Effective content mode; ``tableau`` forces a table."""
        if self.type == "tableau":
            return "table"
        if self.content_list is not None:
            return "list"
        if self.html_content:
            return "html"
        if self.columns is not None or self.rows is not None:
            return "table"
        return "placeholder"


@dataclass(frozen=True)
class Relation:
    """A directed edge between two elements."""

    source: str
    target: str
    title: str | None = None
    subtitle: str | None = None
    content_list: tuple[LabelItem, ...] | None = None
    html_label: str | None = None
    label: str | None = None
    style: str | None = None
    color: str | None = None
    width: float | None = None
    height: float | None = None

    @property
    def label_mode(self) -> Literal["structured", "html", "text", "none"]:
        if self.title or self.content_list:
            return "structured"
        if self.html_label:
            return "html"
        if self.label:
            return "text"
        return "none"


@dataclass(frozen=True)
class DiagramDocument:
    elements: tuple[Element, ...] = ()
    relations: tuple[Relation, ...] = ()

    @property
    def groups(self) -> list[str]:
        """Distinct non-empty group keys in first-appearance order."""
        seen: dict[str, None] = {}
        for element in self.elements:
            if element.group:
                seen.setdefault(element.group, None)
        return list(seen)

    def element(self, element_id: str) -> Element | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None


# ---------------------------------------------------------------------------
# Parsing from plain mappings (YAML / JSON payloads)
# ---------------------------------------------------------------------------


def _opt_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text != "" else None


def _opt_number(value: Any, what: str) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise MalformedRequestError(f"{what} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise MalformedRequestError(f"{what} must be a number, got {value!r}") from None
    if number <= 0:
        raise MalformedRequestError(f"{what} must be positive, got {value!r}")
    return int(number) if number.is_integer() else number


def _as_list(value: Any, what: str) -> list:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise MalformedRequestError(f"{what} must be a list")
    return list(value)


def _parse_modal(raw: Any) -> Modal | None:
    if not isinstance(raw, Mapping):
        return None
    trigger = str(raw.get("on") or "click").strip().lower()
    return Modal(
        title=str(raw.get("title") or ""),
        subtitle=str(raw.get("subtitle") or ""),
        html_content=str(raw.get("html_content") or ""),
        on="hover" if trigger == "hover" else "click",
    )


def _parse_list_item(raw: Any) -> ListItem:
    if not isinstance(raw, Mapping):
        return ListItem(label=str(raw))
    return ListItem(
        label=str(raw.get("label") or ""),
        subtitle=_opt_str(raw.get("subtitle")),
        symbol=_opt_str(raw.get("symbol")),
        url=_opt_str(raw.get("url")),
        modal=_parse_modal(raw.get("modal")),
    )


def _parse_section(raw: Any) -> Section:
    if not isinstance(raw, Mapping):
        return Section(label="")
    values = raw.get("values")
    items = tuple(_parse_list_item(v) for v in values) if isinstance(values, (list, tuple)) else ()
    return Section(label=str(raw.get("label") or ""), symbol=_opt_str(raw.get("symbol")), values=items)


def _parse_tags(raw: Any) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if isinstance(raw, (list, tuple, set, frozenset)):
        return tuple(str(t) for t in raw)
    return ()


def parse_element(raw: Any, index: int) -> Element:
    if not isinstance(raw, Mapping):
        raise MalformedRequestError(f"Element #{index} must be a mapping")
    element_id = _opt_str(raw.get("id"))
    if element_id is None:
        raise MalformedRequestError(f"Element #{index} has no id")

    content_list = raw.get("content_list")
    shape = raw.get("shape")
    columns = raw.get("columns")
    rows = raw.get("rows")

    return Element(
        id=element_id,
        type=str(raw.get("type") or "default"),
        title=_opt_str(raw.get("title")),
        subtitle=_opt_str(raw.get("subtitle")),
        group=_opt_str(raw.get("group")),
        width=_opt_number(raw.get("width"), f"Element '{element_id}' width"),
        height=_opt_number(raw.get("height"), f"Element '{element_id}' height"),
        shape=dict(shape) if isinstance(shape, Mapping) else None,
        tags=_parse_tags(raw.get("tags")),
        content_list=(
            tuple(_parse_section(s) for s in content_list)
            if isinstance(content_list, (list, tuple))
            else None
        ),
        html_content=_opt_str(raw.get("html_content")),
        columns=tuple(columns) if isinstance(columns, (list, tuple)) else None,
        rows=tuple(rows) if isinstance(rows, (list, tuple)) else None,
    )


def parse_relation(raw: Any, index: int) -> Relation:
    if not isinstance(raw, Mapping):
        raise MalformedRequestError(f"Relation #{index} must be a mapping")
    source = _opt_str(raw.get("from"))
    target = _opt_str(raw.get("to"))
    if source is None or target is None:
        raise MalformedRequestError(f"Relation #{index} needs both 'from' and 'to'")

    items = raw.get("content_list")
    content_list = None
    if isinstance(items, (list, tuple)):
        content_list = tuple(
            LabelItem(label=str(i.get("label") or ""), symbol=_opt_str(i.get("symbol")))
            if isinstance(i, Mapping)
            else LabelItem(label=str(i))
            for i in items
        )

    return Relation(
        source=source,
        target=target,
        title=_opt_str(raw.get("title")),
        subtitle=_opt_str(raw.get("subtitle")),
        content_list=content_list,
        html_label=_opt_str(raw.get("html_label")),
        label=_opt_str(raw.get("label")),
        style=_opt_str(raw.get("style")),
        color=_opt_str(raw.get("color")),
        width=_opt_number(raw.get("width"), f"Relation #{index} width"),
        height=_opt_number(raw.get("height"), f"Relation #{index} height"),
    )


def parse_document(data: Any) -> DiagramDocument:
    """Build a DiagramDocument from a parsed YAML/JSON mapping.

    Raises MalformedRequestError when ``elements`` or ``relations`` is missing,
    when an entry is not a mapping, or when element ids repeat.
    """
    if not isinstance(data, Mapping):
        raise MalformedRequestError("Diagram document must be a mapping")
    if data.get("elements") is None or data.get("relations") is None:
        raise MalformedRequestError("Invalid payload: 'elements' and 'relations' are required")

    elements = tuple(
        parse_element(raw, i) for i, raw in enumerate(_as_list(data["elements"], "'elements'"))
    )
    relations = tuple(
        parse_relation(raw, i) for i, raw in enumerate(_as_list(data["relations"], "'relations'"))
    )

    seen: set[str] = set()
    for element in elements:
        if element.id in seen:
            raise MalformedRequestError(f"Duplicate element id '{element.id}'")
        seen.add(element.id)

    return DiagramDocument(elements=elements, relations=relations)
