"""Resolution of require specifiers and global names against the platform."""

from __future__ import annotations

from typing import TYPE_CHECKING

from webtask_analyzer.constants import CORE_VERSION, PLATFORM_GLOBAL_NAMES
from webtask_analyzer.models import ResolvedGlobal, ResolvedImport

if TYPE_CHECKING:
    from webtask_analyzer.catalog import ModuleCatalog
    from webtask_analyzer.models import ParsedSpecifier


def resolve_import(parsed: ParsedSpecifier, catalog: ModuleCatalog) -> ResolvedImport:
    """Resolve a parsed specifier to a package name and version.

    Precedence: explicit version from the specifier, then ``<core>`` for
    native modules, then the registry's preferred version. A package found in
    neither place resolves with ``version=None``.
    """
    name = parsed.name
    version = parsed.version

    if version is None:
        if catalog.is_native(name):
            version = CORE_VERSION
        else:
            version = catalog.preferred_version(name)

    return ResolvedImport(name=name, version=version)


def resolve_global(name: str) -> ResolvedGlobal:
    return ResolvedGlobal(built_in=name in PLATFORM_GLOBAL_NAMES)
