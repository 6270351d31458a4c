"""Stylesheet parsing and timeline rule extraction."""

from keyline.core.stylesheet.cssom import (
    CssKeyframeRule,
    CssKeyframesRule,
    CssRule,
    CssRuleList,
    CssStyleDeclaration,
    CssStyleRule,
    parse_stylesheet,
)
from keyline.core.stylesheet.extractor import (
    compute_rules,
    extract_rules,
    get_max_rule_length,
    normalize_keyframes,
)
from keyline.core.stylesheet.models import (
    FillMode,
    PlaybackDirection,
    RuleExtraction,
    RuleType,
    StyleRule,
    TimelineKeyframe,
    ViewState,
)

__all__ = [
    "CssKeyframeRule",
    "CssKeyframesRule",
    "CssRule",
    "CssRuleList",
    "CssStyleDeclaration",
    "CssStyleRule",
    "FillMode",
    "PlaybackDirection",
    "RuleExtraction",
    "RuleType",
    "StyleRule",
    "TimelineKeyframe",
    "ViewState",
    "compute_rules",
    "extract_rules",
    "get_max_rule_length",
    "normalize_keyframes",
]
