"""
Layering Plan - Declarative table from structural roles to stacking bands.

A plan is an ordered list of role rules. ``band_for`` is a pure function of
an element's role tags: the first matching rule decides the band, elements
matching no rule fall into the default band (Background), and two matching
rules that disagree raise AmbiguousBandError instead of guessing.

Usage:
    plan = LayeringPlan.default()
    band = plan.band_for(element)
    print(band.name, band.order)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..analyzers.role_selector import RoleSelector
from ..contracts.elements import ElementRef
from ..contracts.errors import AmbiguousBandError, ConfigurationError
from ..contracts.layering import LayerBand, PointerPolicy

logger = logging.getLogger("stackcheck.layering.plan")


# Canonical bands, ascending. Tooltip must stay topmost.
BACKGROUND = "Background"
PANEL = "Panel"
CONTROL_GROUP = "ControlGroup"
CONTROL = "Control"
TRANSIENT_OVERLAY = "TransientOverlay"
TOOLTIP = "Tooltip"

REQUIRED_BANDS: Tuple[str, ...] = (
    BACKGROUND,
    PANEL,
    CONTROL_GROUP,
    CONTROL,
    TRANSIENT_OVERLAY,
    TOOLTIP,
)

DEFAULT_BANDS: Tuple[LayerBand, ...] = (
    LayerBand(BACKGROUND, 0, PointerPolicy.BLOCKING),
    LayerBand(PANEL, 1, PointerPolicy.TRANSPARENT),
    LayerBand(CONTROL_GROUP, 2, PointerPolicy.TRANSPARENT),
    LayerBand(CONTROL, 3, PointerPolicy.BLOCKING),
    LayerBand(TRANSIENT_OVERLAY, 4, PointerPolicy.BLOCKING),
    LayerBand(TOOLTIP, 5, PointerPolicy.BLOCKING),
)

# (selector list, band) in match order
DEFAULT_RULES: Tuple[Tuple[str, str], ...] = (
    ("[role=tooltip], .tooltip", TOOLTIP),
    ("[role=dialog], [role=alertdialog], .modal, .overlay, .dropdown-menu, "
     ".mobile-nav-overlay", TRANSIENT_OVERLAY),
    ("button, a, input, select, textarea, summary, .mobile-nav-toggle", CONTROL),
    ("[role=button], [role=link], [role=tab], [role=checkbox], [role=radio], "
     "[role=switch], [role=menuitem], [role=option], [role=slider]", CONTROL),
    ("[role=toolbar], [role=group], [role=tablist], [role=radiogroup], "
     ".toolbar, .btn-group, .button-group, .controls, fieldset", CONTROL_GROUP),
    ("[role=complementary], [role=navigation], "
     ".left-panel, .right-panel, .side-panel, .sidebar, .panel", PANEL),
    ("canvas, .background, .canvas-container", BACKGROUND),
)


@dataclass(frozen=True)
class RoleRule:
    """An ordered rule mapping a selector list to a band name."""

    selector: str
    band: str
    selectors: Tuple[RoleSelector, ...] = field(default=(), compare=False)

    @classmethod
    def create(cls, selector: str, band: str) -> "RoleRule":
        return cls(selector=selector, band=band, selectors=tuple(RoleSelector.parse(selector)))

    def matches(self, element: ElementRef) -> bool:
        return any(s.matches(element) for s in self.selectors)

    def to_dict(self) -> Dict[str, str]:
        return {"selector": self.selector, "band": self.band}


class LayeringPlan:
    """
    Validated mapping from role rules to LayerBands.

    Construction fails with ConfigurationError when:
    - band names or band orders are not unique
    - a required band is missing, out of order, or Tooltip is not topmost
    - a rule references an unknown band or uses an unsupported selector
    """

    def __init__(
        self,
        bands: Iterable[LayerBand],
        rules: Sequence[Tuple[str, str]],
        default_band: str = BACKGROUND,
    ):
        self._bands: Dict[str, LayerBand] = {}
        for band in bands:
            if band.name in self._bands:
                raise ConfigurationError(f"Duplicate band name: {band.name}")
            self._bands[band.name] = band

        orders = [b.order for b in self._bands.values()]
        if len(set(orders)) != len(orders):
            raise ConfigurationError(f"Band orders must be distinct, got {sorted(orders)}")

        self._validate_required_bands()

        if default_band not in self._bands:
            raise ConfigurationError(f"Default band {default_band!r} is not defined")
        self._default_band = self._bands[default_band]

        self._rules: List[RoleRule] = []
        for selector, band_name in rules:
            if band_name not in self._bands:
                raise ConfigurationError(
                    f"Rule {selector!r} references unknown band {band_name!r}"
                )
            self._rules.append(RoleRule.create(selector, band_name))

        logger.debug(f"Built {self!r}")

    def _validate_required_bands(self) -> None:
        missing = [name for name in REQUIRED_BANDS if name not in self._bands]
        if missing:
            raise ConfigurationError(f"Missing required bands: {missing}")

        required_orders = [self._bands[name].order for name in REQUIRED_BANDS]
        if required_orders != sorted(required_orders):
            raise ConfigurationError(
                f"Required bands must ascend as {list(REQUIRED_BANDS)}, got orders {required_orders}"
            )

        if self.top_band.name != TOOLTIP:
            raise ConfigurationError(
                f"{TOOLTIP} must be the topmost band, found {self.top_band.name}"
            )

    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    @classmethod
    def default(cls) -> "LayeringPlan":
        """Plan with the canonical bands and role rules."""
        return cls(DEFAULT_BANDS, DEFAULT_RULES)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayeringPlan":
        """
        Create a plan from JSON-compatible data.

        Missing ``bands`` fall back to the canonical bands and missing
        ``rules`` to the canonical rules.
        """
        try:
            bands = [
                LayerBand(
                    name=b["name"],
                    order=int(b["order"]),
                    pointer_policy=PointerPolicy.from_string(b.get("pointer_policy", "blocking")),
                )
                for b in data.get("bands", [b.to_dict() for b in DEFAULT_BANDS])
            ]
            rules = [
                (r["selector"], r["band"])
                for r in data.get("rules", [{"selector": s, "band": b} for s, b in DEFAULT_RULES])
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed plan definition: {e}") from e

        return cls(bands, rules, default_band=data.get("default_band", BACKGROUND))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bands": [b.to_dict() for b in self.bands],
            "rules": [r.to_dict() for r in self._rules],
            "default_band": self._default_band.name,
        }

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def bands(self) -> List[LayerBand]:
        """Bands sorted by ascending order."""
        return sorted(self._bands.values(), key=lambda b: b.order)

    @property
    def rules(self) -> List[RoleRule]:
        return list(self._rules)

    @property
    def default_band(self) -> LayerBand:
        return self._default_band

    @property
    def top_band(self) -> LayerBand:
        return max(self._bands.values(), key=lambda b: b.order)

    def get_band(self, name: str) -> LayerBand:
        try:
            return self._bands[name]
        except KeyError:
            raise ConfigurationError(f"Unknown band: {name}") from None

    def resolve(self, element: ElementRef) -> Tuple[LayerBand, Optional[RoleRule]]:
        """
        Resolve an element's band and the rule that decided it.

        Returns:
            (band, rule) where rule is None when the default band applies

        Raises:
            AmbiguousBandError: if matching rules name different bands
        """
        matched = [rule for rule in self._rules if rule.matches(element)]
        if not matched:
            return self._default_band, None

        bands = list(dict.fromkeys(rule.band for rule in matched))
        if len(bands) > 1:
            raise AmbiguousBandError(
                element,
                selectors=[rule.selector for rule in matched],
                bands=bands,
            )

        first = matched[0]
        return self._bands[first.band], first

    def band_for(self, element: ElementRef) -> LayerBand:
        """Band for an element; see ``resolve``."""
        band, _ = self.resolve(element)
        return band

    def __repr__(self) -> str:
        return f"LayeringPlan({len(self._bands)} bands, {len(self._rules)} rules)"
