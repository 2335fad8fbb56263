from __future__ import annotations

"""Display labels for stats, gamemodes, and variants."""

from .metrics import get_stat_definition
from .types import GamemodeKey, StatKey, VariantKey

_GAMEMODE_LABELS: dict[str, str] = {
    "overall": "total",
    "solo": "solo",
    "doubles": "doubles",
    "threes": "threes",
    "fours": "fours",
}

_VARIANT_LABELS: dict[str, str] = {
    "session": "session",
    "overall": "all time",
}


# Labels whose capitalized form is not just an upper-cased first letter
_CAPITALIZED_OVERRIDES: dict[str, str] = {
    "index (FKDR^2 * stars)": "Index (FKDR^2 * Stars)",
}


def _capitalized(label: str, capitalize: bool) -> str:
    if not capitalize or not label:
        return label
    if label in _CAPITALIZED_OVERRIDES:
        return _CAPITALIZED_OVERRIDES[label]
    return label[0].upper() + label[1:]


def get_full_stat_label(stat: StatKey, capitalize: bool = False) -> str:
    return _capitalized(get_stat_definition(stat).full_label, capitalize)


def get_short_stat_label(stat: StatKey, capitalize: bool = False) -> str:
    return _capitalized(get_stat_definition(stat).short_label, capitalize)


def get_gamemode_label(gamemode: GamemodeKey, capitalize: bool = False) -> str:
    return _capitalized(_GAMEMODE_LABELS[gamemode], capitalize)


def get_variant_label(variant: VariantKey, capitalize: bool = False) -> str:
    return _capitalized(_VARIANT_LABELS[variant], capitalize)
