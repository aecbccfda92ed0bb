"""Credential signature and resource reference models."""

import re

from pydantic import ConfigDict

from keyguard.models.base import BaseSchema, ResourceKind, Severity


class Pattern(BaseSchema):
    """Named credential signature."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    matcher: re.Pattern[str]
    severity: Severity
    provider: str
    description: str


class ResourceReference(BaseSchema):
    """A sub-resource found in a document.

    ``value`` is the URL as written for ``script-src`` and
    ``stylesheet-href`` references, and the element body for
    ``script-inline``.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=False)

    kind: ResourceKind
    value: str

    @property
    def is_external(self) -> bool:
        return self.kind is not ResourceKind.SCRIPT_INLINE

    @property
    def location(self) -> str:
        """Human label used on findings from this resource."""
        if self.kind is ResourceKind.SCRIPT_SRC:
            return f"JavaScript: {self.value}"
        if self.kind is ResourceKind.STYLESHEET_HREF:
            return f"CSS: {self.value}"
        return "Inline JavaScript"
