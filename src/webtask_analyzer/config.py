"""Connection settings for the webtask cluster that provides the module catalog."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

import param

logger = logging.getLogger(__name__)

ENV_CLUSTER_URL = "WEBTASK_CLUSTER_URL"
ENV_CONTAINER = "WEBTASK_CONTAINER"
ENV_TOKEN = "WEBTASK_TOKEN"

DEFAULT_PROFILE_PATH = Path.home() / ".webtask"


class AnalyzerConfig(param.Parameterized):
    """Where and how to reach the cluster.

    All three connection strings are required and must be non-empty.
    """

    cluster_url = param.String(default="", doc="Base URL of the webtask cluster.")

    container_name = param.String(
        default="", doc="Container the module listing webtask runs in."
    )

    token = param.String(default="", doc="Bearer token used to authenticate with the cluster.")

    timeout = param.Number(
        default=None,
        allow_None=True,
        bounds=(0, None),
        doc="Seconds to wait for the cluster. None waits indefinitely.",
    )

    def __init__(self, **params):
        super().__init__(**params)
        for name in ("cluster_url", "container_name", "token"):
            if not getattr(self, name):
                raise ValueError(f"{name} must be a non-empty string")

    def __repr__(self) -> str:
        # Keep the token out of logs
        return (
            f"AnalyzerConfig(cluster_url={self.cluster_url!r}, "
            f"container_name={self.container_name!r}, timeout={self.timeout!r})"
        )

    @classmethod
    def from_environment(cls) -> AnalyzerConfig | None:
        """Create a config from ``WEBTASK_*`` environment variables.

        Returns:
            The config, or None when none of the variables are set

        Raises:
            ValueError: If only some of the variables are set
        """
        values = {
            "cluster_url": os.environ.get(ENV_CLUSTER_URL, ""),
            "container_name": os.environ.get(ENV_CONTAINER, ""),
            "token": os.environ.get(ENV_TOKEN, ""),
        }
        if not any(values.values()):
            return None

        logger.debug(f"Using cluster configuration from {ENV_CLUSTER_URL}")
        return cls(**values)

    @classmethod
    def from_profile(cls, profile: str = "default", path: Path | str | None = None) -> AnalyzerConfig:
        """Create a config from a webtask CLI profile file.

        The file maps profile names to ``{"url", "container", "token"}`` objects.

        Raises:
            ValueError: If the file is unreadable or lacks the profile
        """
        profile_path = Path(path) if path is not None else DEFAULT_PROFILE_PATH
        try:
            profiles = json.loads(profile_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ValueError(f"Cannot read webtask profiles from {profile_path}: {e}") from e

        entry = profiles.get(profile) if isinstance(profiles, dict) else None
        if not isinstance(entry, dict):
            raise ValueError(f"Missing a webtask profile {profile!r} in {profile_path}")

        logger.debug(f"Using webtask profile {profile!r} from {profile_path}")
        return cls(
            cluster_url=entry.get("url", ""),
            container_name=entry.get("container", ""),
            token=entry.get("token", ""),
        )
