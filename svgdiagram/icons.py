"""Icon lookup and keyword-based icon inference.

Icon markup is opaque: callers only ever ask for an icon by key. Inference for
node titles and cluster headers goes through one ordered keyword table, with
each family scoped to the places it may decorate.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

_STROKE = (
    'fill="none" stroke="currentColor" stroke-width="2" stroke-linecap="round" stroke-linejoin="round"'
)


def _svg(body: str, size: int = 16) -> str:
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" '
        f'viewBox="0 0 24 24" {_STROKE}>{body}</svg>'
    )


ICONS: dict[str, str] = {
    "new": _svg('<path d="M12 22c5.523 0 10-4.477 10-10S17.523 2 12 2 2 6.477 2 12s4.477 10 10 10z"/><path d="M12 8v8"/><path d="M8 12h8"/>'),
    "edit": _svg('<path d="M17 3a2.828 2.828 0 1 1 4 4L7.5 20.5 2 22l1.5-5.5L17 3z"/>'),
    "delete": _svg('<path d="M3 6h18"/><path d="M19 6v14a2 2 0 0 1-2 2H7a2 2 0 0 1-2-2V6m3 0V4a2 2 0 0 1 2-2h4a2 2 0 0 1 2 2v2"/>'),
    "check": _svg('<path d="M22 11.08V12a10 10 0 1 1-5.93-9.14"/><polyline points="22 4 12 14.01 9 11.01"/>'),
    "module": _svg('<path d="M21 16V8a2 2 0 0 0-1-1.73l-7-4a2 2 0 0 0-2 0l-7 4A2 2 0 0 0 3 8v8a2 2 0 0 0 1 1.73l7 4a2 2 0 0 0 2 0l7-4A2 2 0 0 0 21 16z"/><polyline points="3.27 6.96 12 12.01 20.73 6.96"/><line x1="12" y1="22.08" x2="12" y2="12"/>'),
    "info": _svg('<circle cx="12" cy="12" r="10"/><line x1="12" y1="16" x2="12" y2="12"/><line x1="12" y1="8" x2="12.01" y2="8"/>'),
    "link": _svg('<path d="M10 13a5 5 0 0 0 7.54.54l3-3a5 5 0 0 0-7.07-7.07l-1.72 1.72"/><path d="M14 11a5 5 0 0 0-7.54-.54l-3 3a5 5 0 0 0 7.07 7.07l1.72-1.72"/>', size=12),
    "user": _svg('<path d="M20 21v-2a4 4 0 0 0-4-4H8a4 4 0 0 0-4 4v2"/><circle cx="12" cy="7" r="4"/>'),
    "database": _svg('<ellipse cx="12" cy="5" rx="9" ry="3"/><path d="M3 5v14c0 1.66 4 3 9 3s9-1.34 9-3V5"/><path d="M3 12c0 1.66 4 3 9 3s9-1.34 9-3"/>'),
    "api": _svg('<path d="M18 8h-1a2 2 0 0 0-2 2v4a2 2 0 0 0 2 2h1"/><path d="M2 8h1a2 2 0 0 1 2 2v4a2 2 0 0 1-2 2H2"/><path d="M12 2v20"/>'),
    "warning": _svg('<path d="m21.73 18-8-14a2 2 0 0 0-3.46 0l-8 14A2 2 0 0 0 4 21h16a2 2 0 0 0 1.73-3Z"/><line x1="12" y1="9" x2="12" y2="13"/><line x1="12" y1="17" x2="12.01" y2="17"/>'),
}

NODE = "node"
GROUP = "group"


@dataclass(frozen=True)
class IconFamily:
    icon: str
    keywords: frozenset[str]
    # cluster headers also match these
    group_keywords: frozenset[str] = frozenset()
    scopes: frozenset[str] = frozenset({NODE, GROUP})

    def words(self, scope: str) -> frozenset[str]:
        if scope not in self.scopes:
            return frozenset()
        if scope == GROUP:
            return self.keywords | self.group_keywords
        return self.keywords


# Ordered: the first family that matches wins.
ICON_KEYWORDS: tuple[IconFamily, ...] = (
    IconFamily("user", frozenset({"person", "user", "people"}), frozenset({"humain", "utilisateur"})),
    IconFamily("database", frozenset({"database", "db", "data"}), frozenset({"donnée"})),
    IconFamily("api", frozenset({"api", "service"})),
    IconFamily("warning", frozenset({"warning", "alert", "risk"}), frozenset({"risque"})),
    IconFamily("new", frozenset({"new", "add"}), scopes=frozenset({NODE})),
    IconFamily("edit", frozenset({"edit", "update"}), scopes=frozenset({NODE})),
    IconFamily("delete", frozenset({"delete", "remove"}), scopes=frozenset({NODE})),
    IconFamily("module", frozenset({"module", "package"}), scopes=frozenset({GROUP})),
    IconFamily("info", frozenset({"info", "information"}), scopes=frozenset({GROUP})),
)

_SIZE_ATTR = {
    "width": re.compile(r'width="\d+"'),
    "height": re.compile(r'height="\d+"'),
}


def icon_svg(key: str | None, size: int | None = None) -> str:
    """Icon markup for ``key`` (empty string when unknown), optionally resized."""
    if not key:
        return ""
    svg = ICONS.get(str(key).strip().lower(), "")
    if svg and size is not None:
        for attr, pattern in _SIZE_ATTR.items():
            svg = pattern.sub(f'{attr}="{size}"', svg, count=1)
    return svg


def match_icon(candidates: Iterable[str], *, scope: str = NODE, substring: bool = False) -> str | None:
    """Return the icon key of the first keyword family matching any candidate.

    Only families enabled for ``scope`` take part. With ``substring`` a family
    matches when one of its keywords appears anywhere inside a candidate;
    otherwise candidates must equal a keyword.
    """
    words = [str(c).strip().lower() for c in candidates if c]
    if not words:
        return None
    for family in ICON_KEYWORDS:
        keywords = family.words(scope)
        for word in words:
            if substring:
                if any(k in word for k in keywords):
                    return family.icon
            elif word in keywords:
                return family.icon
    return None


def infer_element_icon(tags: Iterable[str], element_type: str | None) -> str | None:
    """Tags take priority over the element type."""
    return match_icon(tags) or match_icon([element_type or ""])


def infer_group_icon(label: str | None) -> str | None:
    return match_icon([label or ""], scope=GROUP, substring=True)
