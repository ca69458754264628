"""
In-memory RenderedDocument for tests.

Stacking model (simplified CSS):
- Paint order is compared on the chain of positioned ancestors; each link
  is (z-index or 0, positioned, document index).
- z-index only counts on positioned elements.
- pointer-events "none" removes an element from hit-testing; unset values
  inherit from the parent.
- Zero-area or rect-less nodes are never hit.
"""

import copy
from typing import Dict, List, Optional, Sequence, Tuple

from stackcheck.analyzers import InteractiveDetector
from stackcheck.contracts import (
    BoundingRect,
    ConfigurationError,
    DocumentUnavailableError,
    ElementGeometry,
    ElementRef,
    OverlayPanelSpec,
    PresentationOverride,
    ViewportState,
)
from stackcheck.sandbox.document import RenderedDocument


PANEL_WIDTH = 240
PANEL_GAP = 8

_detector = InteractiveDetector()


class FakeNode:
    """A node with inline presentation and a fixed layout box."""

    def __init__(
        self,
        key: int,
        tag: str,
        parent: Optional["FakeNode"] = None,
        rect: Optional[Tuple[float, float, float, float]] = None,
        element_id: Optional[str] = None,
        classes: Sequence[str] = (),
        role: Optional[str] = None,
        attrs: Optional[Dict[str, str]] = None,
        position: str = "static",
        z_index: Optional[int] = None,
        pointer_events: Optional[str] = None,
        synthetic: bool = False,
        interactive: Optional[bool] = None,
    ):
        self.key = key
        self.tag = tag
        self.parent = parent
        self.children: List[FakeNode] = []
        self.rect = BoundingRect(*rect) if rect else BoundingRect(0, 0, 0, 0)
        self.element_id = element_id
        self.classes = tuple(classes)
        self.role = role
        self.attrs = dict(attrs or {})
        self.position = position
        self.z_index = z_index
        self.pointer_events = pointer_events
        self.synthetic = synthetic
        self.forwards_to: Optional[FakeNode] = None

        if interactive is None:
            all_attrs = dict(self.attrs, **{"class": list(self.classes)})
            if role:
                all_attrs["role"] = role
            interactive = _detector.is_interactive(tag, all_attrs)
        self.interactive = interactive

    def ancestors(self) -> List["FakeNode"]:
        chain = []
        node = self.parent
        while node is not None:
            chain.append(node)
            node = node.parent
        return chain


class FakeDocument(RenderedDocument):
    """
    RenderedDocument over FakeNodes.

    Build a tree with ``add`` (parents before children); reads and hit-tests
    follow the stacking model in the module docstring.
    """

    def __init__(self, width: int = 1280, height: int = 720):
        super().__init__()
        self.width = width
        self.height = height
        self.roots: List[FakeNode] = []
        self.nodes: Dict[int, FakeNode] = {}
        self.overrides: Dict[int, Dict[str, object]] = {}
        self.detached = False
        self.fail_after_writes: Optional[int] = None
        self.write_calls = 0
        self.ready_calls = 0
        self.activations: List[int] = []
        self._next_key = 0

    # =========================================================================
    # BUILDING
    # =========================================================================

    def add(self, tag: str, parent: Optional[FakeNode] = None, **kwargs) -> FakeNode:
        node = FakeNode(self._next_key, tag, parent=parent, **kwargs)
        self._next_key += 1
        self.nodes[node.key] = node
        if parent is None:
            self.roots.append(node)
        else:
            parent.children.append(node)
        return node

    def ref(self, node: FakeNode) -> ElementRef:
        parent = node.parent
        return ElementRef(
            key=node.key,
            tag=node.tag,
            element_id=node.element_id,
            classes=node.classes,
            role=node.role,
            interactive=node.interactive,
            parent_key=parent.key if parent is not None else None,
            synthetic=node.synthetic,
            selector=f"#{node.element_id}" if node.element_id else f"{node.tag}[{node.key}]",
        )

    def node(self, element: ElementRef) -> FakeNode:
        self._check()
        try:
            return self.nodes[element.key]
        except KeyError:
            raise DocumentUnavailableError(f"Element {element.key} is detached") from None

    def detach(self) -> None:
        self.detached = True

    def ordered(self) -> List[FakeNode]:
        out: List[FakeNode] = []

        def walk(node: FakeNode) -> None:
            out.append(node)
            for child in node.children:
                walk(child)

        for root in self.roots:
            walk(root)
        return out

    def _check(self) -> None:
        if self.detached:
            raise DocumentUnavailableError("Document is detached")

    # =========================================================================
    # COMPUTED STYLE
    # =========================================================================

    def computed_z(self, node: FakeNode) -> Optional[int]:
        value = self.overrides.get(node.key, {}).get("z_index")
        return value if value is not None else node.z_index

    def computed_position(self, node: FakeNode) -> str:
        if node.position == "static" and self.overrides.get(node.key, {}).get("positioned"):
            return "relative"
        return node.position

    def computed_pointer_events(self, node: FakeNode) -> str:
        for candidate in [node] + node.ancestors():
            value = self.overrides.get(candidate.key, {}).get("pointer_events")
            if value is None:
                value = candidate.pointer_events
            if value is not None:
                return value
        return "auto"

    def paint_key(self, node: FakeNode, index: Dict[int, int]) -> List[Tuple[int, int, int]]:
        chain = [a for a in reversed(node.ancestors()) if self.computed_position(a) != "static"]
        key = []
        for link in chain + [node]:
            positioned = self.computed_position(link) != "static"
            z = self.computed_z(link) if positioned else None
            key.append((z or 0, int(positioned), index[link.key]))
        return key

    # =========================================================================
    # RenderedDocument
    # =========================================================================

    async def ensure_ready(self) -> None:
        self._check()
        self.ready_calls += 1

    async def viewport_state(self) -> ViewportState:
        self._check()
        return ViewportState(width=self.width, height=self.height)

    async def elements(self) -> List[ElementRef]:
        self._check()
        return [self.ref(n) for n in self.ordered() if not n.synthetic]

    async def geometry(self, element: ElementRef) -> ElementGeometry:
        node = self.node(element)
        position = self.computed_position(node)
        return ElementGeometry(
            rect=node.rect,
            z_index=self.computed_z(node) if position != "static" else None,
            position=position,
            pointer_events=self.computed_pointer_events(node),
        )

    async def elements_at_point(self, x: float, y: float) -> List[ElementRef]:
        self._check()
        return [self.ref(n) for n in self.hit_stack(x, y)]

    def hit_stack(self, x: float, y: float) -> List[FakeNode]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return []
        ordered = self.ordered()
        index = {n.key: i for i, n in enumerate(ordered)}
        hits = [
            n for n in ordered
            if n.rect.has_area
            and n.rect.contains_point(x, y)
            and self.computed_pointer_events(n) != "none"
        ]
        return sorted(hits, key=lambda n: self.paint_key(n, index), reverse=True)

    async def contains(self, ancestor: ElementRef, node: ElementRef) -> bool:
        target = self.node(node)
        return any(a.key == ancestor.key for a in target.ancestors())

    async def snapshot_overrides(self):
        self._check()
        return copy.deepcopy(self.overrides)

    async def clear_overrides(self) -> None:
        self._check()
        self.overrides = {}

    async def write_overrides(self, overrides: Sequence[PresentationOverride]) -> None:
        self._check()
        if self.fail_after_writes is not None and self.write_calls >= self.fail_after_writes:
            raise DocumentUnavailableError("Document detached during write")
        self.write_calls += 1

        targets = [self.node(ElementRef(key=o.key)) for o in overrides]
        for override, node in zip(overrides, targets):
            entry = self.overrides.setdefault(node.key, {})
            if override.z_index is not None:
                entry["z_index"] = override.z_index
            if override.pointer_events:
                entry["pointer_events"] = override.pointer_events
            if override.ensure_positioned:
                entry["positioned"] = True

    async def restore_overrides(self, snapshot) -> None:
        self._check()
        self.overrides = copy.deepcopy(snapshot or {})

    async def create_overlay_panel(self, spec: OverlayPanelSpec) -> ElementRef:
        self._check()
        existing = self.find_by_id(spec.panel_id)
        if existing is not None:
            if not existing.synthetic:
                raise ConfigurationError(f"Element #{spec.panel_id} already exists")
            self._remove(existing)

        panel = self.add(
            "div",
            element_id=spec.panel_id,
            role="group",
            rect=(self.width - spec.right_px - PANEL_WIDTH, spec.top_px, PANEL_WIDTH, 0),
            position="fixed",
            z_index=spec.z_index,
            pointer_events="auto",
            synthetic=True,
            interactive=False,
        )
        return self.ref(panel)

    async def remove_overlay_panel(self, panel_id: str) -> bool:
        self._check()
        panel = self.find_by_id(panel_id)
        if panel is None or not panel.synthetic:
            return False
        self._remove(panel)
        return True

    async def clone_into(self, element: ElementRef, panel: ElementRef) -> ElementRef:
        original = self.node(element)
        container = self.node(panel)

        offset = container.rect.height + (PANEL_GAP if container.children else 0)
        width = min(original.rect.width, PANEL_WIDTH)
        clone = self.add(
            original.tag,
            parent=container,
            rect=(container.rect.x, container.rect.y + offset, width, original.rect.height),
            element_id=f"{original.element_id}--remediated" if original.element_id else None,
            classes=original.classes,
            role=original.role,
            position="relative",
            pointer_events="auto",
            synthetic=True,
            interactive=True,
        )
        clone.forwards_to = original
        if original.rect.has_area:
            container.rect = BoundingRect(
                container.rect.x,
                container.rect.y,
                container.rect.width,
                offset + original.rect.height,
            )
        return self.ref(clone)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def find_by_id(self, element_id: str) -> Optional[FakeNode]:
        for node in self.ordered():
            if node.element_id == element_id:
                return node
        return None

    def _remove(self, node: FakeNode) -> None:
        for child in list(node.children):
            self._remove(child)
        if node.parent is None:
            self.roots.remove(node)
        else:
            node.parent.children.remove(node)
        self.nodes.pop(node.key, None)
        self.overrides.pop(node.key, None)

    def click_at(self, x: float, y: float) -> Optional[int]:
        """Click a point; records and returns the key of the activated control."""
        stack = self.hit_stack(x, y)
        if not stack:
            return None
        for node in [stack[0]] + stack[0].ancestors():
            if node.forwards_to is not None:
                self.activations.append(node.forwards_to.key)
                return node.forwards_to.key
            if node.interactive:
                self.activations.append(node.key)
                return node.key
        return None
