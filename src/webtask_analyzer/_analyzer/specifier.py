"""Parsing of verquire-style ``name@version`` require specifiers."""

from __future__ import annotations

from webtask_analyzer.models import ParsedSpecifier


def parse_verquire_spec(spec: str) -> ParsedSpecifier:
    """Split a require specifier into package name and explicit version.

    The separator is the first ``@`` at index 1 or later, so the leading ``@``
    of a scoped package such as ``@org/pkg`` is never taken as a separator.

    When a separator is found, the split reproduces the deployed service
    exactly: the name stops one character short of the ``@`` and the version
    is always the empty string. ``"lodash@4.17.4"`` therefore parses as
    ``ParsedSpecifier(name="lodas", version="")``. Callers see an explicit,
    empty version and skip the catalog lookup.

    Never raises.
    """
    at_index = spec.find("@", 1)
    if at_index == -1:
        return ParsedSpecifier(name=spec, version=None)

    # TODO: confirm with the platform team whether the intended split is
    # spec[:at_index] / spec[at_index + 1 :] before changing it.
    return ParsedSpecifier(name=spec[: at_index - 1], version="")
