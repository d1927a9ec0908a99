"""
Module catalog of a webtask cluster.

The catalog lists the native modules of the container's Node.js runtime and
the versions of every third-party package the platform can provide. It is
obtained by running a small webtask (``webtasks/list_modules.js``) on the
cluster.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx

from .constants import RUN_ENDPOINT
from .exceptions import CatalogError

if TYPE_CHECKING:
    from .config import AnalyzerConfig

logger = logging.getLogger(__name__)

LIST_MODULES_SCRIPT = Path(__file__).parent / "webtasks" / "list_modules.js"


@dataclass(frozen=True)
class ModuleCatalog:
    """Snapshot of the modules available on the platform."""

    native_module_names: frozenset[str] = frozenset()
    verquire_modules: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> ModuleCatalog:
        """Build a catalog from the JSON body returned by the cluster.

        Raises:
            CatalogError: If the body does not have the expected shape
        """
        if not isinstance(data, dict):
            raise CatalogError(f"Module list must be an object, got {type(data).__name__}")

        native = data.get("nativeModuleNames")
        if not isinstance(native, list) or not all(isinstance(n, str) for n in native):
            raise CatalogError("nativeModuleNames must be a list of strings")

        verquire = data.get("verquireModules")
        if not isinstance(verquire, dict):
            raise CatalogError("verquireModules must be an object")

        versions: dict[str, tuple[str, ...]] = {}
        for name, available in verquire.items():
            if not isinstance(available, list) or not all(isinstance(v, str) for v in available):
                raise CatalogError(f"Versions of {name!r} must be a list of strings")
            versions[name] = tuple(available)

        return cls(native_module_names=frozenset(native), verquire_modules=versions)

    def is_native(self, name: str) -> bool:
        return name in self.native_module_names

    def preferred_version(self, name: str) -> str | None:
        """Default version the platform provides for ``name``, if any."""
        available = self.verquire_modules.get(name)
        return available[0] if available else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nativeModuleNames": sorted(self.native_module_names),
            "verquireModules": {name: list(v) for name, v in self.verquire_modules.items()},
        }


async def fetch_module_catalog(
    config: AnalyzerConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ModuleCatalog:
    """Run the module listing webtask on the cluster and parse its result.

    Args:
        config: Cluster location and credentials
        transport: Optional httpx transport, used by tests to stub the cluster

    Returns:
        The platform's module catalog

    Raises:
        CatalogError: On transport failure, non-200 status or malformed body
    """
    script = LIST_MODULES_SCRIPT.read_text(encoding="utf-8")
    url = RUN_ENDPOINT.format(container=quote(config.container_name, safe=""))

    logger.debug(f"Loading module list from {config.cluster_url}{url}")
    try:
        async with httpx.AsyncClient(
            base_url=config.cluster_url,
            headers={"Authorization": f"Bearer {config.token}"},
            timeout=config.timeout,
            transport=transport,
        ) as client:
            response = await client.post(url, content=script)
    except httpx.HTTPError as e:
        logger.error(f"Module list request to {config.cluster_url} failed: {e}")
        raise CatalogError(f"Module list request failed: {e}") from e

    if response.status_code != 200:
        logger.error(f"Module list request returned status {response.status_code}")
        raise CatalogError(
            f"Unexpected status code: {response.status_code}", status_code=response.status_code
        )

    try:
        data = response.json()
    except ValueError as e:
        raise CatalogError(f"Module list response is not valid JSON: {e}") from e

    catalog = ModuleCatalog.from_json(data)
    logger.info(
        f"Loaded {len(catalog.native_module_names)} native module(s) and "
        f"{len(catalog.verquire_modules)} verquire package(s)"
    )
    return catalog
