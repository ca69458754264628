"""
Role Selector - Selector-style matching against structural role tags.

Only the parts of CSS selector syntax that describe an element's own role
are supported: a tag name (or ``*``), ``#id``, ``.class`` and ``[role]`` /
``[role=value]``. Combinators, pseudo-classes and other attributes are
rejected so plans never depend on content or document position.

Usage:
    selectors = RoleSelector.parse(".left-panel, aside, [role=complementary]")
    any(s.matches(element) for s in selectors)
"""

import re
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from ..contracts.elements import ElementRef
from ..contracts.errors import ConfigurationError


_SIMPLE_SELECTOR = re.compile(
    r"""
    (?P<tag>^(?:\*|[a-zA-Z][a-zA-Z0-9-]*))
    | \#(?P<id>-?[A-Za-z_][\w-]*)
    | \.(?P<cls>-?[A-Za-z_][\w-]*)
    | \[\s*(?P<attr>[A-Za-z-]+)\s*
        (?:=\s*(?P<quote>["']?)(?P<value>[^"'\]]*)(?P=quote)\s*)?
      \]
    """,
    re.VERBOSE,
)

SUPPORTED_ATTRIBUTES = frozenset({"role"})


@dataclass(frozen=True)
class RoleSelector:
    """One compound selector, e.g. ``button.primary[role=tab]``."""

    text: str
    tag: Optional[str] = None
    element_id: Optional[str] = None
    classes: FrozenSet[str] = field(default_factory=frozenset)
    role_present: bool = False
    role: Optional[str] = None

    def __repr__(self) -> str:
        return f"RoleSelector({self.text!r})"

    @classmethod
    def parse(cls, text: str) -> List["RoleSelector"]:
        """
        Parse a comma-separated selector list.

        Raises:
            ConfigurationError: if any part uses unsupported syntax
        """
        parts = [part.strip() for part in text.split(",")]
        if not text.strip() or any(not part for part in parts):
            raise ConfigurationError(f"Empty selector in {text!r}")
        return [cls._parse_compound(part) for part in parts]

    @classmethod
    def _parse_compound(cls, text: str) -> "RoleSelector":
        tag = None
        element_id = None
        classes = set()
        role_present = False
        role = None

        pos = 0
        while pos < len(text):
            match = _SIMPLE_SELECTOR.match(text, pos)
            if not match or match.end() == pos:
                raise ConfigurationError(
                    f"Unsupported selector syntax at {text[pos:]!r} in {text!r}"
                )
            if match.group("tag"):
                tag = None if match.group("tag") == "*" else match.group("tag").lower()
            elif match.group("id"):
                element_id = match.group("id")
            elif match.group("cls"):
                classes.add(match.group("cls"))
            else:
                attr = match.group("attr").lower()
                if attr not in SUPPORTED_ATTRIBUTES:
                    raise ConfigurationError(
                        f"Attribute [{attr}] is not a role tag (in {text!r})"
                    )
                role_present = True
                if match.group("value") is not None:
                    role = match.group("value").strip().lower()
            pos = match.end()

        return cls(
            text=text,
            tag=tag,
            element_id=element_id,
            classes=frozenset(classes),
            role_present=role_present,
            role=role,
        )

    def matches(self, element: ElementRef) -> bool:
        """Check the element's role-tag snapshot against this selector."""
        if self.tag and element.tag.lower() != self.tag:
            return False
        if self.element_id and element.element_id != self.element_id:
            return False
        if self.classes and not self.classes.issubset(element.classes):
            return False
        if self.role_present:
            if not element.role:
                return False
            if self.role is not None and self.role not in element.role.split():
                return False
        return True
