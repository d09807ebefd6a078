"""Testnet topology document.

The YAML describes the whole network (client matrix, fork parameters,
auxiliary services). Only the pieces this launcher acts on are modelled in
detail; the rest is kept as plain data for whoever else consumes the file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .api_models import DockerCacheParamsModel, TolerationModel
from .config import LauncherConfig, get_config
from .plan import Plan
from .sentinel import SENTINEL_IMAGE, ServiceHandle, launch_sentinel

logger = logging.getLogger(__name__)

SENTINEL_SERVICE = "sentinel"


class ParticipantParams(BaseModel):
    el_type: str = "reth"
    el_image: str = ""
    cl_type: str = "lighthouse"
    cl_image: str = ""
    count: int = Field(1, ge=1)


class SentinelParams(BaseModel):
    image: str = SENTINEL_IMAGE
    service_name: str = "sentinel"
    bitcoin_rpc_url: str | None = None
    bitcoin_rpc_user: str | None = None
    bitcoin_rpc_pass: str | None = None
    confirmation_threshold: int | None = Field(None, ge=1)
    revert_threshold: int | None = Field(None, ge=1)
    min_cpu: int = Field(0, ge=0, description="millicores")
    max_cpu: int = Field(0, ge=0, description="millicores")
    min_mem: int = Field(0, ge=0, description="MB")
    max_mem: int = Field(0, ge=0, description="MB")

    def launcher_config(self) -> LauncherConfig:
        return get_config(
            bitcoin_rpc_url=self.bitcoin_rpc_url,
            bitcoin_rpc_user=self.bitcoin_rpc_user,
            bitcoin_rpc_pass=self.bitcoin_rpc_pass,
            confirmation_threshold=self.confirmation_threshold,
            revert_threshold=self.revert_threshold,
        )


class TopologyParams(BaseModel):
    participants: list[ParticipantParams] = Field(default_factory=list)
    network_params: dict[str, Any] = Field(default_factory=dict)
    additional_services: list[str] = Field(default_factory=list)
    sentinel_params: SentinelParams = Field(default_factory=SentinelParams)
    docker_cache_params: DockerCacheParamsModel = Field(default_factory=DockerCacheParamsModel)
    persistent: bool = False
    global_tolerations: list[TolerationModel] = Field(default_factory=list)
    global_node_selectors: dict[str, str] = Field(default_factory=dict)


def load_topology(path: str | Path) -> TopologyParams:
    content = Path(path).read_text(encoding="utf-8")
    data = yaml.safe_load(content) or {}
    return TopologyParams.model_validate(data)


def sentinel_launch_kwargs(topology: TopologyParams) -> dict[str, Any]:
    """Keyword arguments for launch_sentinel/build_service_config drawn from the topology."""
    p = topology.sentinel_params
    return dict(
        config=p.launcher_config(),
        service_name=p.service_name,
        min_cpu=p.min_cpu,
        max_cpu=p.max_cpu,
        min_mem=p.min_mem,
        max_mem=p.max_mem,
        persistent=topology.persistent,
        tolerations=[t.to_toleration() for t in topology.global_tolerations],
        node_selectors=dict(topology.global_node_selectors),
        docker_cache_params=topology.docker_cache_params.to_params(),
        image=p.image,
    )


def launch_additional_services(plan: Plan, topology: TopologyParams) -> dict[str, ServiceHandle]:
    """Launch the auxiliary services this package knows how to run.

    Only the sentinel is launched here; other names are left to their own
    tooling and skipped with a warning.
    """
    handles: dict[str, ServiceHandle] = {}
    for name in topology.additional_services:
        if name != SENTINEL_SERVICE:
            logger.warning("Skipping additional service '%s': not launched by sovanet", name)
            continue
        handle = launch_sentinel(plan, **sentinel_launch_kwargs(topology))
        handles[name] = handle
    return handles
