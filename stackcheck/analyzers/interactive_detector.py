"""
Interactive Detector - Decide whether an element is an interactive control.

The same rules run in Python (static snapshots) and in the browser
(generated into the page helpers by ``js_evaluators``), so both sides agree
on which elements the reachability probe must verify.

Usage:
    from stackcheck.analyzers import InteractiveDetector

    detector = InteractiveDetector()
    detector.is_interactive("button", {})                 # True
    detector.is_interactive("div", {"role": "button"})    # True
    detector.is_interactive("a", {})                      # False (no href)
"""

from typing import Any, Dict, Mapping, Set


class InteractiveDetector:
    """
    Detects interactive elements from a tag name and attribute mapping.

    An element is interactive when it is not disabled and any of:
    - it is an inherently interactive tag (links need an href)
    - it carries an inline event handler
    - it has an interactive ARIA role
    - it is focusable through a non-negative tabindex
    - it uses the cursor-pointer utility class or is contenteditable
    """

    # Tags that are inherently interactive
    INTERACTIVE_TAGS: Set[str] = {
        "button",
        "a",
        "input",
        "select",
        "textarea",
        "details",
        "summary",
    }

    # Attributes that indicate interactivity
    INTERACTIVE_ATTRS: Set[str] = {
        "onclick",
        "onmousedown",
        "onmouseup",
        "onpointerdown",
        "onpointerup",
        "ontouchstart",
        "ontouchend",
    }

    # ARIA roles that indicate interactivity
    INTERACTIVE_ROLES: Set[str] = {
        "button",
        "link",
        "checkbox",
        "radio",
        "tab",
        "menuitem",
        "menuitemcheckbox",
        "menuitemradio",
        "option",
        "switch",
        "slider",
        "spinbutton",
        "textbox",
        "combobox",
        "listbox",
        "searchbox",
        "gridcell",
        "treeitem",
    }

    POINTER_CLASSES: Set[str] = {"cursor-pointer", "clickable"}

    def is_interactive(self, tag: str, attrs: Mapping[str, Any]) -> bool:
        """
        Determine if an element is interactive.

        Args:
            tag: Tag name (any case)
            attrs: Attribute mapping; ``class`` may be a string or a list

        Returns:
            True if element should respond to pointer interaction
        """
        tag = tag.lower()
        if "disabled" in attrs:
            return False

        if tag in self.INTERACTIVE_TAGS:
            if tag == "a" and not attrs.get("href"):
                return self.has_event_handler(attrs)
            if tag == "input" and str(attrs.get("type", "text")).lower() == "hidden":
                return False
            return True

        if self.has_event_handler(attrs):
            return True

        role = str(attrs.get("role") or "").strip().lower()
        if role in self.INTERACTIVE_ROLES:
            return True

        tabindex = attrs.get("tabindex")
        if tabindex is not None:
            try:
                if int(tabindex) >= 0:
                    return True
            except ValueError:
                pass

        if self.POINTER_CLASSES & set(self._classes(attrs)):
            return True

        return str(attrs.get("contenteditable", "")).lower() == "true"

    def has_event_handler(self, attrs: Mapping[str, Any]) -> bool:
        return any(name in attrs for name in self.INTERACTIVE_ATTRS)

    def to_js_config(self) -> Dict[str, Any]:
        """Rule tables in the shape consumed by the browser helpers."""
        return {
            "tags": sorted(self.INTERACTIVE_TAGS),
            "attrs": sorted(self.INTERACTIVE_ATTRS),
            "roles": sorted(self.INTERACTIVE_ROLES),
            "pointerClasses": sorted(self.POINTER_CLASSES),
        }

    @staticmethod
    def _classes(attrs: Mapping[str, Any]):
        value = attrs.get("class") or []
        if isinstance(value, str):
            return value.split()
        return list(value)
