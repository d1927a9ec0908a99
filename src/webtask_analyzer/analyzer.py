"""
Dependency analysis of webtask code.

Finds every ``require`` call and every free identifier in a script, and
resolves them against the module catalog of a webtask cluster, so the
platform knows what a script depends on before it runs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ._analyzer.globals_finder import find_global_names
from ._analyzer.require_walker import find_requires
from ._analyzer.resolver import resolve_global, resolve_import
from ._analyzer.specifier import parse_verquire_spec
from ._analyzer.ts_parser import parse
from .catalog import ModuleCatalog, fetch_module_catalog
from .config import AnalyzerConfig
from .models import (
    DynamicImportOccurrence,
    GlobalOccurrence,
    Occurrence,
    StaticImportOccurrence,
)

if TYPE_CHECKING:
    import httpx

    from ._analyzer.ts_parser import SourceOrTree

logger = logging.getLogger(__name__)


def resolve_dependencies(source_or_tree: SourceOrTree, catalog: ModuleCatalog) -> list[Occurrence]:
    """Find and resolve the dependencies of ``source_or_tree`` against ``catalog``.

    The source is parsed once and both walkers run over the same tree.

    Returns:
        All require occurrences in traversal order, followed by all global
        occurrences grouped by name

    Raises:
        ParseError: If the source is not valid JavaScript
    """
    parsed = parse(source_or_tree)
    dependencies: list[Occurrence] = []

    for require in find_requires(parsed):
        if require.dynamic:
            dependencies.append(
                DynamicImportOccurrence(spec=require.spec, start=require.start, end=require.end)
            )
        else:
            dependencies.append(
                StaticImportOccurrence(
                    spec=require.spec,
                    start=require.start,
                    end=require.end,
                    resolved=resolve_import(parse_verquire_spec(require.spec), catalog),
                )
            )

    dependencies.extend(
        GlobalOccurrence(
            spec=reference.name,
            start=reference.start,
            end=reference.end,
            resolved=resolve_global(reference.name),
        )
        for reference in find_global_names(parsed)
    )

    return dependencies


class Analyzer:
    """Analyzes webtask code against the modules of one cluster container.

    The module catalog is fetched once, on first use, and shared by every
    later call on this instance. Failures are cached too: once loading has
    failed, every call fails with the same error until a new analyzer is
    created.
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        *,
        cluster_url: str | None = None,
        container_name: str | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if config is None:
            config = AnalyzerConfig(
                cluster_url=cluster_url or "",
                container_name=container_name or "",
                token=token or "",
            )
        elif not isinstance(config, AnalyzerConfig):
            raise ValueError(f"config must be an AnalyzerConfig, got {type(config).__name__}")
        elif (cluster_url, container_name, token) != (None, None, None):
            raise ValueError("Pass either config or cluster_url/container_name/token, not both")

        self.config = config
        self._transport = transport
        self._modules_load: asyncio.Future[ModuleCatalog] | None = None

    async def load_module_list(self) -> ModuleCatalog:
        """Load all modules supported by the cluster.

        Concurrent callers share a single request.

        Raises:
            CatalogError: If the catalog could not be fetched, now or earlier
        """
        if self._modules_load is None:
            logger.debug(f"Starting module list load for {self.config.container_name!r}")
            self._modules_load = asyncio.ensure_future(
                fetch_module_catalog(self.config, transport=self._transport)
            )
        # One cancelled caller must not cancel the load for everyone else
        return await asyncio.shield(self._modules_load)

    async def find_dependencies_in_code(self, source_or_tree: SourceOrTree) -> list[Occurrence]:
        """Find and resolve the dependencies of a script.

        Args:
            source_or_tree: Source text or an already parsed source

        Returns:
            Require occurrences in traversal order followed by global occurrences

        Raises:
            CatalogError: If the module catalog is unavailable
            ParseError: If the source is not valid JavaScript
        """
        catalog = await self.load_module_list()
        return resolve_dependencies(source_or_tree, catalog)
