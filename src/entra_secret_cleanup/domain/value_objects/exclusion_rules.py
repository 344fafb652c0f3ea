"""Exclusion rules value object."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

from ..exceptions import InvalidExclusionRulesError


def _split_patterns(raw: str) -> tuple[str, ...]:
    """Split a comma-separated list, trimming entries and dropping empty ones."""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True, slots=True)
class ExclusionRules:
    """Substring patterns protecting expired credentials from deletion."""

    names: tuple[str, ...] = ()
    descriptions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Reject blank patterns, which would match every credential."""
        for pattern in (*self.names, *self.descriptions):
            if not isinstance(pattern, str) or not pattern.strip():
                msg = f"Exclusion patterns must be non-empty strings, got {pattern!r}"
                raise InvalidExclusionRulesError(msg)

    @classmethod
    def from_csv(cls, names: str = "", descriptions: str = "") -> Self:
        """Build rules from comma-separated name and description lists."""
        return cls(
            names=_split_patterns(names),
            descriptions=_split_patterns(descriptions),
        )

    @property
    def is_empty(self) -> bool:
        """Check if no exclusion pattern is configured."""
        return not (self.names or self.descriptions)

    def matches(self, display_name: str | None, hint: str | None) -> bool:
        """
        Check if a credential is protected by any rule.

        Matching is case-sensitive. An empty display name or hint never matches.
        """
        if display_name and any(name in display_name for name in self.names):
            return True
        return bool(hint) and any(desc in hint for desc in self.descriptions)
