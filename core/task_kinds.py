"""Catalogue of task kinds and the My Day groups they fall into."""
from __future__ import annotations

from typing import Dict

# Kinds come from the screen a task was saved from. Several kinds share a group.
KIND_META: Dict[str, Dict[str, str]] = {
    "custom": {"label": "Minha tarefa", "group": "para-hoje"},
    "today": {"label": "Para hoje", "group": "para-hoje"},
    "top3": {"label": "Top 3 do dia", "group": "para-hoje"},
    "agenda": {"label": "Agenda", "group": "para-hoje"},
    "family": {"label": "Família", "group": "familia"},
    "selfcare": {"label": "Autocuidado", "group": "autocuidado"},
    "home": {"label": "Rotina da casa", "group": "rotina-casa"},
    "other": {"label": "Outros", "group": "outros"},
}

DEFAULT_KIND = "custom"
FALLBACK_KIND = "other"

GROUP_ORDER = ("para-hoje", "familia", "autocuidado", "rotina-casa", "outros")

GROUP_LABELS: Dict[str, str] = {
    "para-hoje": "Para hoje",
    "familia": "Família",
    "autocuidado": "Autocuidado",
    "rotina-casa": "Rotina da casa",
    "outros": "Outros",
}


def normalize_kind(value: str | None) -> str:
    """Map external values onto a known kind; unknown values become ``other``."""
    if value is None:
        return FALLBACK_KIND
    text = str(value).strip().lower()
    return text if text in KIND_META else FALLBACK_KIND


def kind_label(value: str) -> str:
    meta = KIND_META.get(value, KIND_META[FALLBACK_KIND])
    return meta["label"]


def group_for_kind(value: str) -> str:
    meta = KIND_META.get(value, KIND_META[FALLBACK_KIND])
    return meta["group"]


__all__ = [
    "DEFAULT_KIND",
    "FALLBACK_KIND",
    "GROUP_LABELS",
    "GROUP_ORDER",
    "KIND_META",
    "group_for_kind",
    "kind_label",
    "normalize_kind",
]
