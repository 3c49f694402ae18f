#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
User preferences stored in settings.json.

Stored documents may come from any earlier version: missing keys take
their defaults, legacy keys are migrated, and invalid values fall back to
the default instead of failing.
"""

from typing import Any, Dict, Mapping

from quicksheet.config import load_settings, save_settings
from quicksheet.models import (
    DEFAULT_HALF_LIFE_DAYS,
    CopyPreset,
    CopyToggles,
    Preferences,
    RankingMode,
    RankingPreferences,
)

# Legacy copyMode values -> copyPreset
LEGACY_COPY_MODES = {
    "plain": CopyPreset.PLAIN_COMPACT,
    "latex": CopyPreset.LATEX_INLINE,
    "markdown": CopyPreset.MARKDOWN_INLINE,
}

TOGGLE_KEYS = {
    "includeUnits": "include_units",
    "includeName": "include_name",
    "includeSymbol": "include_symbol",
    "includeText": "include_text",
    "includeCategory": "include_category",
    "includeSource": "include_source",
}

# Keys owned by this module inside settings.json
PREFERENCE_KEYS = (
    "copyPreset",
    "copyToggles",
    "rankingMode",
    "rankingHalfLifeDays",
    "instantRerankOnCopy",
)


def _parse_preset(raw: Mapping[str, Any]) -> CopyPreset:
    value = raw.get("copyPreset")
    if value is None and raw.get("copyMode"):
        return LEGACY_COPY_MODES.get(raw["copyMode"], CopyPreset.PLAIN_COMPACT)
    try:
        return CopyPreset(value)
    except ValueError:
        return CopyPreset.PLAIN_COMPACT


def _parse_toggles(raw: Any) -> CopyToggles:
    toggles = CopyToggles()
    if not isinstance(raw, Mapping):
        return toggles
    for key, attr in TOGGLE_KEYS.items():
        if isinstance(raw.get(key), bool):
            setattr(toggles, attr, raw[key])
    return toggles


def _parse_half_life(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return DEFAULT_HALF_LIFE_DAYS
    if value < 0:
        return DEFAULT_HALF_LIFE_DAYS
    return value


def migrate(raw: Any) -> Preferences:
    """Overlay a stored preferences document onto the defaults.

    Args:
        raw: Parsed settings document of any historical shape

    Returns:
        Complete Preferences.
    """
    if not isinstance(raw, Mapping):
        return Preferences()

    try:
        mode = RankingMode.parse(raw.get("rankingMode", RankingMode.EXPLICIT_ORDER))
    except ValueError:
        mode = RankingMode.EXPLICIT_ORDER

    return Preferences(
        copy_preset=_parse_preset(raw),
        copy_toggles=_parse_toggles(raw.get("copyToggles")),
        ranking=RankingPreferences(
            ranking_mode=mode,
            ranking_half_life_days=_parse_half_life(raw.get("rankingHalfLifeDays")),
            instant_rerank_on_copy=bool(raw.get("instantRerankOnCopy", False)),
        ),
    )


def to_dict(prefs: Preferences) -> Dict[str, Any]:
    """Serialize preferences to their settings.json representation."""
    return {
        "copyPreset": prefs.copy_preset.value,
        "copyToggles": {
            key: getattr(prefs.copy_toggles, attr) for key, attr in TOGGLE_KEYS.items()
        },
        "rankingMode": prefs.ranking.ranking_mode.value,
        "rankingHalfLifeDays": prefs.ranking.ranking_half_life_days,
        "instantRerankOnCopy": prefs.ranking.instant_rerank_on_copy,
    }


def get_preferences() -> Preferences:
    return migrate(load_settings())


def _normalize_update(update: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate a legacy copyMode in an update into copyPreset."""
    result = dict(update)
    legacy = result.pop("copyMode", None)
    if legacy is not None and "copyPreset" not in result:
        result["copyPreset"] = LEGACY_COPY_MODES.get(legacy, CopyPreset.PLAIN_COMPACT).value
    return result


def merge(prefs: Preferences, update: Mapping[str, Any]) -> Preferences:
    """Overlay a partial update onto existing preferences.

    ``copyToggles`` is merged key by key; everything else replaces.
    """
    merged = to_dict(prefs)
    for key, value in _normalize_update(update).items():
        if key == "copyToggles" and isinstance(value, Mapping):
            merged["copyToggles"] = {**merged["copyToggles"], **value}
        else:
            merged[key] = value
    return migrate(merged)


def set_preferences(update: Mapping[str, Any]) -> Preferences:
    """Persist a partial update and return the merged result.

    Unrelated keys in settings.json (e.g. debugLevel) are preserved.
    """
    settings = load_settings()
    prefs = merge(migrate(settings), update)
    settings.pop("copyMode", None)
    settings.update(to_dict(prefs))
    save_settings(settings)
    return prefs
