"""
Tests for LayeringPlan construction, validation and band resolution.
"""

import pytest

from stackcheck.contracts import (
    AmbiguousBandError,
    ConfigurationError,
    ElementRef,
    LayerBand,
    PointerPolicy,
)
from stackcheck.layering import (
    BACKGROUND,
    CONTROL,
    CONTROL_GROUP,
    DEFAULT_BANDS,
    DEFAULT_RULES,
    PANEL,
    TOOLTIP,
    TRANSIENT_OVERLAY,
    LayeringPlan,
)


def element(tag="div", classes=(), role=None, element_id=None) -> ElementRef:
    return ElementRef(key=1, tag=tag, classes=tuple(classes), role=role, element_id=element_id)


def bands_with(**changes):
    """Canonical bands with some replaced by name."""
    return [changes.get(b.name, b) for b in DEFAULT_BANDS]


# =============================================================================
# Canonical plan
# =============================================================================

class TestDefaultPlan:
    """Tests for the canonical plan."""

    def test_required_bands_ascending(self, plan):
        names = [b.name for b in plan.bands]
        assert names == [BACKGROUND, PANEL, CONTROL_GROUP, CONTROL, TRANSIENT_OVERLAY, TOOLTIP]

    def test_tooltip_is_topmost(self, plan):
        assert plan.top_band.name == TOOLTIP

    def test_transparent_bands(self, plan):
        transparent = {b.name for b in plan.bands if b.is_transparent}
        assert transparent == {PANEL, CONTROL_GROUP}

    @pytest.mark.parametrize("ref,expected", [
        (element("canvas"), BACKGROUND),
        (element(classes=["left-panel"]), PANEL),
        (element(role="navigation"), PANEL),
        (element(classes=["toolbar"]), CONTROL_GROUP),
        (element("fieldset"), CONTROL_GROUP),
        (element("button"), CONTROL),
        (element(role="tab"), CONTROL),
        (element(classes=["mobile-nav-toggle"]), CONTROL),
        (element(classes=["modal"]), TRANSIENT_OVERLAY),
        (element(role="dialog"), TRANSIENT_OVERLAY),
        (element(role="tooltip"), TOOLTIP),
        (element(classes=["tooltip"]), TOOLTIP),
    ])
    def test_band_for(self, plan, ref, expected):
        assert plan.band_for(ref).name == expected

    def test_unmatched_element_defaults_to_background(self, plan):
        band, rule = plan.resolve(element("section", classes=["hero"]))

        assert band.name == BACKGROUND
        assert rule is None

    def test_resolve_reports_rule(self, plan):
        band, rule = plan.resolve(element("button"))

        assert band.name == CONTROL
        assert "button" in rule.selector

    def test_band_for_is_pure(self, plan):
        ref = element("nav")
        assert plan.band_for(ref) == plan.band_for(ref)

    @pytest.mark.parametrize("ref,expected", [
        (element("nav", role="tablist"), CONTROL_GROUP),
        (element("aside", role="dialog"), TRANSIENT_OVERLAY),
        (element("nav", classes=["sidebar"]), PANEL),
        (element("aside"), BACKGROUND),
        (element("nav"), BACKGROUND),
    ])
    def test_landmark_tags_take_their_band_from_role_or_class(self, plan, ref, expected):
        assert plan.band_for(ref).name == expected


# =============================================================================
# Ambiguity
# =============================================================================

class TestAmbiguity:
    """Tests for AmbiguousBandError."""

    def test_conflicting_rules_raise(self, plan):
        # .sidebar -> Panel, .modal -> TransientOverlay
        with pytest.raises(AmbiguousBandError) as exc_info:
            plan.band_for(element("div", classes=["sidebar", "modal"]))

        assert exc_info.value.bands == [TRANSIENT_OVERLAY, PANEL]
        assert len(exc_info.value.selectors) == 2

    def test_ambiguity_is_a_configuration_error(self, plan):
        with pytest.raises(ConfigurationError):
            plan.band_for(element("button", classes=["panel"]))

    def test_agreeing_rules_are_not_ambiguous(self):
        plan = LayeringPlan(DEFAULT_BANDS, [
            (".primary", CONTROL),
            ("button", CONTROL),
        ])
        band, rule = plan.resolve(element("button", classes=["primary"]))

        assert band.name == CONTROL
        assert rule.selector == ".primary"


# =============================================================================
# Validation
# =============================================================================

class TestValidation:
    """Tests for construction-time validation."""

    def test_unknown_band_in_rule(self):
        with pytest.raises(ConfigurationError, match="unknown band"):
            LayeringPlan(DEFAULT_BANDS, [(".x", "Floating")])

    def test_duplicate_band_name(self):
        bands = list(DEFAULT_BANDS) + [LayerBand(PANEL, 9)]
        with pytest.raises(ConfigurationError, match="Duplicate band name"):
            LayeringPlan(bands, [])

    def test_duplicate_band_order(self):
        bands = list(DEFAULT_BANDS) + [LayerBand("Extra", 3)]
        with pytest.raises(ConfigurationError, match="distinct"):
            LayeringPlan(bands, [])

    def test_missing_required_band(self):
        bands = [b for b in DEFAULT_BANDS if b.name != CONTROL_GROUP]
        with pytest.raises(ConfigurationError, match="Missing required bands"):
            LayeringPlan(bands, [])

    def test_required_bands_out_of_order(self):
        bands = bands_with(
            Panel=LayerBand(PANEL, 2, PointerPolicy.TRANSPARENT),
            ControlGroup=LayerBand(CONTROL_GROUP, 1, PointerPolicy.TRANSPARENT),
        )
        with pytest.raises(ConfigurationError, match="ascend"):
            LayeringPlan(bands, [])

    def test_tooltip_must_be_topmost(self):
        bands = list(DEFAULT_BANDS) + [LayerBand("Above", 10)]
        with pytest.raises(ConfigurationError, match="topmost"):
            LayeringPlan(bands, [])

    def test_extra_band_below_tooltip_allowed(self):
        bands = bands_with(Tooltip=LayerBand(TOOLTIP, 10)) + [LayerBand("Toast", 7)]
        plan = LayeringPlan(bands, [(".toast", "Toast")])

        assert plan.band_for(element(classes=["toast"])).order == 7

    def test_unknown_default_band(self):
        with pytest.raises(ConfigurationError, match="Default band"):
            LayeringPlan(DEFAULT_BANDS, [], default_band="Nowhere")

    def test_bad_selector(self):
        with pytest.raises(ConfigurationError):
            LayeringPlan(DEFAULT_BANDS, [("nav > a", CONTROL)])


# =============================================================================
# Serialization
# =============================================================================

class TestSerialization:
    """Tests for from_dict / to_dict."""

    def test_round_trip(self, plan):
        restored = LayeringPlan.from_dict(plan.to_dict())

        assert restored.bands == plan.bands
        assert [r.selector for r in restored.rules] == [s for s, _ in DEFAULT_RULES]

    def test_rules_only_uses_canonical_bands(self):
        plan = LayeringPlan.from_dict({"rules": [{"selector": ".hud", "band": CONTROL}]})

        assert len(plan.bands) == 6
        assert plan.band_for(element(classes=["hud"])).name == CONTROL
        assert plan.band_for(element("button")).name == BACKGROUND

    def test_pointer_policy_string(self):
        data = LayeringPlan.default().to_dict()
        assert data["bands"][1] == {"name": PANEL, "order": 1, "pointer_policy": "transparent"}

    @pytest.mark.parametrize("data", [
        {"bands": [{"order": 1}]},
        {"bands": [{"name": "X", "order": "high"}]},
        {"rules": [{"selector": ".x"}]},
        {"bands": [{"name": "X", "order": 1, "pointer_policy": "sticky"}]},
    ])
    def test_malformed_definition(self, data):
        with pytest.raises(ConfigurationError):
            LayeringPlan.from_dict(data)
