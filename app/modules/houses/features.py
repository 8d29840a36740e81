from typing import Any, Dict, List, Optional

from app.config.features_config import DEFAULT_FEATURE_CONFIG, FEATURE_ORDER


def get_feature_config(settings: Optional[Dict[str, Any]], feature_id: str) -> Dict[str, Any]:
    """Merged feature config for a house (defaults + house overrides).

    Missing settings or a missing entry means the defaults apply, so houses
    created before feature toggles existed keep their original behaviour.
    """
    if feature_id not in DEFAULT_FEATURE_CONFIG:
        raise KeyError(f"Unknown feature: {feature_id}")
    overrides = ((settings or {}).get("features") or {}).get(feature_id) or {}
    return {**DEFAULT_FEATURE_CONFIG[feature_id], **overrides}


def get_enabled_features(settings: Optional[Dict[str, Any]]) -> List[str]:
    return [fid for fid in FEATURE_ORDER if get_feature_config(settings, fid)["enabled"]]


def is_feature_enabled(settings: Optional[Dict[str, Any]], feature_id: str) -> bool:
    return bool(get_feature_config(settings, feature_id)["enabled"])


def get_feature_label(settings: Optional[Dict[str, Any]], feature_id: str) -> str:
    return get_feature_config(settings, feature_id)["label"]
