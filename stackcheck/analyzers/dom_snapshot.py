"""
DOM Snapshot - Static role-tag snapshot of an HTML string using BeautifulSoup.

Produces ElementRefs in the same traversal order and with the same selector
and interactivity rules as the browser registry, so a LayeringPlan can be
previewed without rendering the page.

Usage:
    from stackcheck.analyzers import snapshot_html

    elements = snapshot_html(html_string)
    for element in elements:
        print(element.key, element.selector, element.interactive)
"""

from typing import Dict, List, Optional

from bs4 import BeautifulSoup, Tag

from ..contracts.elements import ElementRef
from .interactive_detector import InteractiveDetector


# Elements that never render a box
SKIPPED_TAGS = frozenset({
    "script",
    "style",
    "template",
    "noscript",
    "link",
    "meta",
    "title",
    "head",
})

_SPECIAL_CHARS = frozenset(":[]()/\\@#!$%^&*+={}'\"<>,.")


def generate_selector(element: Tag) -> str:
    """
    Generate a readable CSS selector for an element.

    Priority:
    1. ID if present
    2. Tag + up to three safe classes + nth-of-type when ambiguous
    """
    if element.get("id"):
        return f"#{element['id']}"

    selector = element.name
    classes = [c for c in element.get("class", []) if not (_SPECIAL_CHARS & set(c))]
    if classes:
        selector += "." + ".".join(classes[:3])

    if element.parent is not None:
        same_tag = [
            sib for sib in element.parent.children
            if isinstance(sib, Tag) and sib.name == element.name
        ]
        if len(same_tag) > 1:
            selector += f":nth-of-type({same_tag.index(element) + 1})"

    return selector


def snapshot_html(html: str, detector: Optional[InteractiveDetector] = None) -> List[ElementRef]:
    """
    Build ElementRefs for every rendered element under <body>, in document order.

    Args:
        html: Raw HTML string
        detector: InteractiveDetector to classify controls

    Returns:
        List of ElementRef; keys are traversal indices
    """
    detector = detector or InteractiveDetector()
    soup = BeautifulSoup(html, "html.parser")
    root = soup.find("body") or soup

    keys: Dict[int, int] = {}
    elements: List[ElementRef] = []

    for node in root.descendants:
        if not isinstance(node, Tag) or node.name.lower() in SKIPPED_TAGS:
            continue
        if any(parent.name in SKIPPED_TAGS for parent in node.parents if isinstance(parent, Tag)):
            continue

        key = len(elements)
        keys[id(node)] = key
        parent = node.parent
        role = node.get("role")

        elements.append(ElementRef(
            key=key,
            tag=node.name.lower(),
            element_id=node.get("id") or None,
            classes=tuple(node.get("class", [])),
            role=role.strip().lower() if role else None,
            interactive=detector.is_interactive(node.name, node.attrs),
            parent_key=keys.get(id(parent)) if parent is not root else None,
            selector=generate_selector(node),
        ))

    return elements
