"""Data models for webtask-analyzer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from .constants import TYPE_GLOBAL, TYPE_REQUIRE, TYPE_REQUIRE_DYNAMIC


@dataclass(frozen=True)
class ParsedSpecifier:
    """A require specifier split into package name and explicit version."""

    name: str
    version: str | None = None


@dataclass(frozen=True)
class ResolvedImport:
    """Package a static require resolves to.

    ``version`` is ``None`` when the package is unknown to the platform.
    """

    name: str
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.version is not None:
            data["version"] = self.version
        return data


@dataclass(frozen=True)
class ResolvedGlobal:
    """Whether a free identifier is provided by the runtime."""

    built_in: bool

    def to_dict(self) -> dict[str, Any]:
        return {"builtIn": self.built_in}


@dataclass(frozen=True)
class RequireCall:
    """A ``require(...)`` call site found in the syntax tree."""

    spec: str
    start: int
    end: int
    dynamic: bool = False


@dataclass(frozen=True)
class GlobalReference:
    """A single reference to an undeclared identifier."""

    name: str
    start: int
    end: int


@dataclass(frozen=True)
class GlobalOccurrence:
    """Reference to a free identifier, with its built-in classification."""

    type: ClassVar[str] = TYPE_GLOBAL

    spec: str
    start: int
    end: int
    resolved: ResolvedGlobal

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "spec": self.spec,
            "start": self.start,
            "end": self.end,
            "resolved": self.resolved.to_dict(),
        }


@dataclass(frozen=True)
class StaticImportOccurrence:
    """``require`` call with a single literal argument, resolved against the catalog."""

    type: ClassVar[str] = TYPE_REQUIRE

    spec: str
    start: int
    end: int
    resolved: ResolvedImport

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "spec": self.spec,
            "start": self.start,
            "end": self.end,
            "resolved": self.resolved.to_dict(),
        }


@dataclass(frozen=True)
class DynamicImportOccurrence:
    """``require`` call whose target cannot be known statically. Never resolved."""

    type: ClassVar[str] = TYPE_REQUIRE_DYNAMIC

    spec: str
    start: int
    end: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "spec": self.spec,
            "start": self.start,
            "end": self.end,
        }


Occurrence = Union[GlobalOccurrence, StaticImportOccurrence, DynamicImportOccurrence]
