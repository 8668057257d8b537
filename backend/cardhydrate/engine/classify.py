"""Semantic classifier — maps node ids to hydration roles.

Ids are matched by exact, case-sensitive prefix. The legacy-element rules
(contact dots, old dividers) follow template-authoring convention and are kept
verbatim rather than generalized.
"""

from __future__ import annotations

import enum
import re

TEXT_PREFIXES = ("#name", "#title", "#phone", "#email", "#website", "#address")
CONTACT_PREFIXES = ("#phone", "#email", "#website", "#address")
COLOR_PREFIXES = ("#color_primary", "#color_secondary", "#color_accent")
LOCKED_PREFIXES = ("#lock", "#bg")
LOGO_PREFIX = "#logo"
LAYOUT_PREFIX = "#layout_"

LAYOUT_DIVIDER_ID = "#layout_divider"
LAYOUT_DOT_PREFIX = "#layout_dot_"

_LEGACY_DIVIDER_MARKERS = ("divider", "title_line", "section_line")
_CONTACT_DOT_RE = re.compile(r"phone|email|web|addr|contact", re.IGNORECASE)


class Role(str, enum.Enum):
    TEXT_FIELD = "text_field"
    LOGO = "logo"
    LOCKED = "locked"
    COLOR_MAPPED = "color_mapped"
    LEGACY_DOT = "legacy_dot"
    LEGACY_DIVIDER = "legacy_divider"
    PLAIN = "plain"


def starts_with_any(value: str, prefixes: tuple[str, ...]) -> bool:
    return any(value.startswith(p) for p in prefixes)


def is_text_field(node_id: str) -> bool:
    return starts_with_any(node_id, TEXT_PREFIXES)


def is_locked(node_id: str) -> bool:
    return starts_with_any(node_id, LOCKED_PREFIXES)


def is_background_role(node_id: str) -> bool:
    return node_id.startswith("#bg")


def is_legacy_divider(node_id: str) -> bool:
    return any(marker in node_id for marker in _LEGACY_DIVIDER_MARKERS)


def is_contact_dot(node_id: str) -> bool:
    """Small decorative accents tied to contact fields (icon dots, rings)."""
    if not node_id.startswith("#color_accent_"):
        return False
    if is_legacy_divider(node_id):
        return False
    return bool(_CONTACT_DOT_RE.search(node_id))


def is_layout_structural(node_id: str) -> bool:
    return node_id == LAYOUT_DIVIDER_ID or node_id.startswith(LAYOUT_DOT_PREFIX)


def color_key(node_id: str) -> str | None:
    """``#color_primary_banner`` -> ``primary``; None for non color-mapped ids."""
    if not starts_with_any(node_id, COLOR_PREFIXES):
        return None
    return node_id[len("#color_"):].split("_")[0]


def classify(node_id: str, standardized: bool = True) -> Role:
    """Role of a leaf (or locked group) node, in flatten-pass priority order."""
    if not node_id:
        return Role.PLAIN
    if is_text_field(node_id):
        return Role.TEXT_FIELD
    if node_id.startswith(LOGO_PREFIX):
        return Role.LOGO
    if standardized and is_contact_dot(node_id):
        return Role.LEGACY_DOT
    if standardized and is_legacy_divider(node_id):
        return Role.LEGACY_DIVIDER
    if starts_with_any(node_id, COLOR_PREFIXES):
        return Role.COLOR_MAPPED
    if is_locked(node_id):
        return Role.LOCKED
    return Role.PLAIN
