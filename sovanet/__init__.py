"""Sova testnet launcher (sovanet).

Builds the service descriptor for the sova-sentinel node, submits it to an
orchestration plan (Docker by default) and hands back where it ended up:
 - LauncherConfig / get_config: per-environment sentinel settings
 - launch_sentinel: descriptor assembly plus a single plan submission
 - topology: the YAML network description that drives a full launch
"""

from .config import DockerCacheParams, LauncherConfig, get_config
from .sentinel import ServiceHandle, build_service_config, launch_sentinel

__all__ = [
    "DockerCacheParams",
    "LauncherConfig",
    "ServiceHandle",
    "build_service_config",
    "get_config",
    "launch_sentinel",
]
