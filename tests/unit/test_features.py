import pytest

from app.config.features_config import FEATURE_ORDER
from app.modules.houses.features import (
    get_enabled_features, get_feature_config, get_feature_label, is_feature_enabled
)


def test_missing_settings_fall_back_to_defaults():
    assert get_feature_config(None, "calendar") == {"enabled": True, "label": "Reserve your bed"}
    assert get_feature_config({}, "chat") == {"enabled": False, "label": "Chat"}


def test_house_overrides_merge_over_defaults():
    settings = {"features": {"weather": {"label": "Snow report"}, "chat": {"enabled": True}}}
    assert get_feature_config(settings, "weather") == {"enabled": True, "label": "Snow report"}
    assert is_feature_enabled(settings, "chat")
    assert get_feature_label(settings, "chat") == "Chat"


def test_enabled_features_follow_display_order():
    settings = {"features": {"calendar": {"enabled": False}, "itinerary": {"enabled": True}}}
    enabled = get_enabled_features(settings)
    assert "calendar" not in enabled
    assert enabled == [f for f in FEATURE_ORDER if f in enabled]
    assert enabled[0] == "itinerary"


def test_unknown_feature_raises():
    with pytest.raises(KeyError):
        get_feature_config({}, "sauna")
