import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pinpoint.core.exceptions import InvalidLocatorError


class MatchMode(Enum):
    """How an attribute or text value is compared."""
    EXACT = "exact"
    CONTAINS = "contains"


@dataclass(frozen=True)
class AttributePredicate:
    """A typed attribute test: name, expected value and match mode."""
    name: str
    value: str
    mode: MatchMode = MatchMode.EXACT

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise InvalidLocatorError("Attribute predicate needs an attribute name")
        object.__setattr__(self, "name", self.name.strip().lower())

    def evaluate(self, actual: Optional[str]) -> bool:
        """Test an attribute value; a missing attribute never matches."""
        if actual is None:
            return False
        if self.mode is MatchMode.CONTAINS:
            return self.value in actual
        if self.name == "class":
            # Exact class match means one of the class tokens, like CSS `.name`
            return actual == self.value or self.value in actual.split()
        return actual == self.value

    def __str__(self) -> str:
        op = "*=" if self.mode is MatchMode.CONTAINS else "="
        return f'[{self.name}{op}"{self.value}"]'


@dataclass(frozen=True)
class LocatorSpec:
    """
    What to find: a tag, one attribute predicate and optional constraints.

    Attributes:
        tag: Element tag; None or "*" match any tag
        predicate: Attribute the target must carry
        ancestor: Spec for an element the target must be nested in
        index: 0-based position among candidates in document order
        text: Visible text, matched by the built-in text handlers
        text_mode: Whether text must match exactly or only be contained
    """
    tag: Optional[str] = None
    predicate: Optional[AttributePredicate] = None
    ancestor: Optional["LocatorSpec"] = None
    index: Optional[int] = None
    text: Optional[str] = None
    text_mode: MatchMode = MatchMode.EXACT

    def __post_init__(self) -> None:
        tag = self.tag.strip().lower() if self.tag else None
        object.__setattr__(self, "tag", None if tag in (None, "", "*") else tag)
        if self.predicate is None and not self.text:
            raise InvalidLocatorError("LocatorSpec needs an attribute predicate or text")
        if self.index is not None and (isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0):
            raise InvalidLocatorError(f"Index must be a non-negative integer, got {self.index!r}")

    @classmethod
    def where(
        cls,
        name: str,
        value: str,
        tag: Optional[str] = None,
        contains: bool = False,
        ancestor: Optional["LocatorSpec"] = None,
        index: Optional[int] = None,
    ) -> "LocatorSpec":
        """Shorthand for a spec with one attribute predicate."""
        mode = MatchMode.CONTAINS if contains else MatchMode.EXACT
        return cls(tag=tag, predicate=AttributePredicate(name, value, mode), ancestor=ancestor, index=index)

    def accepts_tag(self, tag: str) -> bool:
        return self.tag is None or self.tag == tag

    def depth(self) -> int:
        """Number of nested ancestor constraints."""
        return 0 if self.ancestor is None else 1 + self.ancestor.depth()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "predicate": {
                "name": self.predicate.name,
                "value": self.predicate.value,
                "mode": self.predicate.mode.value,
            } if self.predicate else None,
            "ancestor": self.ancestor.to_dict() if self.ancestor else None,
            "index": self.index,
            "text": self.text,
            "text_mode": self.text_mode.value,
        }

    def __str__(self) -> str:
        if self.text and self.predicate is None:
            partial = "partial_" if self.text_mode is MatchMode.CONTAINS else ""
            if self.tag is None:
                base = f"{partial}link={self.text}"
            elif self.tag == "a":
                base = f"a:{partial}link={self.text}"
            else:
                base = f"{self.tag}:{partial}text={self.text}"
        else:
            base = f"{self.tag or ''}{self.predicate or ''}" or "*"
        if self.index is not None:
            base += f" >> nth={self.index}"
        if self.ancestor is not None:
            base += f" within {self.ancestor}"
        return base


class RegexLocatorParser:
    """
    Parses compact locator strings into LocatorSpecs.

    Supported forms:
        #signup                         id
        input[placeholder="Username"]   attribute, exact
        input[name*=user]               attribute, contains
        button.primary                  class token
        link=Sign up                    link text
        partial_link=Sign               partial link text
        button:text=Sign up             element text
        button:partial_text=Sign        element text, contains
        input[type=text] >> nth=1       index among candidates
        input[type=text] within form#login-form
    """

    _WITHIN = re.compile(r"\s+within\s+", re.IGNORECASE)
    _NTH = re.compile(r"\s*>>\s*nth\s*=\s*(-?\d+)\s*$", re.IGNORECASE)
    _TEXT = re.compile(
        r"^(?:(?P<tag>[A-Za-z][\w-]*):)?(?P<kind>partial_link|link|partial_text|text)\s*=\s*(?P<value>.+)$",
        re.IGNORECASE,
    )
    _TAG = re.compile(r"^([A-Za-z][\w-]*|\*)")
    _TOKEN = re.compile(
        r"#(?P<id>[\w-]+)"
        r"|\.(?P<cls>[\w-]+)"
        r"|\[\s*(?P<attr>[\w:-]+)\s*(?P<op>\*?=)\s*"
        r"(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<bare>[^\]]*?))\s*\]"
    )

    def parse(self, locator: str) -> LocatorSpec:
        if not locator or not locator.strip():
            raise InvalidLocatorError("Empty locator")

        parts = self._WITHIN.split(locator.strip())
        # Innermost scope last: "a within b within c" means c contains b contains a
        spec: Optional[LocatorSpec] = None
        for raw in reversed(parts):
            spec = self._parse_simple(raw.strip(), ancestor=spec)
        return spec

    def _parse_simple(self, text: str, ancestor: Optional[LocatorSpec]) -> LocatorSpec:
        if not text:
            raise InvalidLocatorError("Empty selector in locator")

        index = None
        nth_match = self._NTH.search(text)
        if nth_match:
            index = int(nth_match.group(1))
            if index < 0:
                raise InvalidLocatorError(f"Negative index in {text!r}")
            text = text[:nth_match.start()].strip()

        text_match = self._TEXT.match(text)
        if text_match:
            kind = text_match.group("kind").lower()
            tag = text_match.group("tag")
            if kind.endswith("link") and tag is not None and tag.lower() != "a":
                raise InvalidLocatorError(f"{kind}= only applies to links, not <{tag}>")
            if kind.endswith("text") and tag is None:
                raise InvalidLocatorError(f"{kind}= needs a tag, e.g. button:{kind}=...; use link= for anchors")
            mode = MatchMode.CONTAINS if kind.startswith("partial") else MatchMode.EXACT
            return LocatorSpec(
                tag=tag,
                text=text_match.group("value").strip().strip("'\""),
                text_mode=mode,
                ancestor=ancestor,
                index=index,
            )

        tag = None
        tag_match = self._TAG.match(text)
        if tag_match:
            tag = tag_match.group(1)
            text = text[tag_match.end():]

        predicates: List[AttributePredicate] = []
        pos = 0
        while pos < len(text):
            token = self._TOKEN.match(text, pos)
            if token is None:
                raise InvalidLocatorError(f"Cannot parse locator near {text[pos:]!r}")
            predicates.append(self._to_predicate(token))
            pos = token.end()

        if len(predicates) > 1:
            raise InvalidLocatorError(f"Only one attribute predicate is supported, got {len(predicates)}")
        if not predicates:
            raise InvalidLocatorError(f"Locator {tag or text!r} has no attribute predicate")

        return LocatorSpec(tag=tag, predicate=predicates[0], ancestor=ancestor, index=index)

    @staticmethod
    def _to_predicate(token: "re.Match") -> AttributePredicate:
        if token.group("id") is not None:
            return AttributePredicate("id", token.group("id"))
        if token.group("cls") is not None:
            return AttributePredicate("class", token.group("cls"))
        value = next(
            (token.group(g) for g in ("dq", "sq", "bare") if token.group(g) is not None),
            "",
        )
        mode = MatchMode.CONTAINS if token.group("op") == "*=" else MatchMode.EXACT
        return AttributePredicate(token.group("attr"), value.strip() if token.group("bare") is not None else value, mode)


_parser = RegexLocatorParser()


def parse_locator(locator: str) -> LocatorSpec:
    """Parse a locator string with the default parser."""
    return _parser.parse(locator)
