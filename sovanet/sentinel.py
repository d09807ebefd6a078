"""Sentinel launcher.

The sentinel watches Bitcoin confirmations and tells the sequencer when a
slot lock is safe to release (or has been reverted). Launching it is a
single pass: build the descriptor, hand it to the plan once, wrap the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import constants
from .config import DockerCacheParams, LauncherConfig
from .descriptor import Directory, PortSpec, ServiceConfig, Toleration
from .images import rewrite_image
from .labels import label_maker
from .metrics import MetricsInfo, new_metrics_info
from .plan import Plan

logger = logging.getLogger(__name__)

SENTINEL_IMAGE = "ghcr.io/sovanetwork/sova-sentinel:latest"
SENTINEL_CLIENT = "sova-sentinel"

GRPC_PORT_ID = "grpc"
GRPC_PORT = 50051
METRICS_PORT_ID = "metrics"
METRICS_PORT = 9102
METRICS_PATH = "/metrics"

DATA_DIR = "/var/lib/sova-sentinel"
DB_PATH = f"{DATA_DIR}/slot_locks.db"
PERSISTENT_VOLUME_SIZE = 1 * constants.GB

BIND_HOST = "0.0.0.0"
LOG_LEVEL = "debug"

USED_PORTS = {
    GRPC_PORT_ID: PortSpec(number=GRPC_PORT, transport_protocol=constants.TCP_PROTOCOL, application_protocol="grpc"),
    # Disabled until the sentinel binary serves metrics. metrics_info on the
    # returned handle still points at METRICS_PORT.
    # METRICS_PORT_ID: PortSpec(number=METRICS_PORT, transport_protocol=constants.TCP_PROTOCOL, application_protocol="http"),
}


@dataclass(frozen=True)
class ServiceHandle:
    service_name: str
    ip_address: str
    grpc_port: int
    metrics_info: MetricsInfo
    grpc_url: str


def resolve_thresholds(
    config: LauncherConfig,
    confirmation_threshold: int | None = None,
    revert_threshold: int | None = None,
) -> tuple[int, int]:
    """Per-launch overrides win over the values stored in `config`."""
    return (
        confirmation_threshold if confirmation_threshold is not None else config.confirmation_threshold,
        revert_threshold if revert_threshold is not None else config.revert_threshold,
    )


def sentinel_env_vars(config: LauncherConfig, confirmation_threshold: int, revert_threshold: int) -> dict[str, str]:
    env = {
        "SOVA_SENTINEL_HOST": BIND_HOST,
        "SOVA_SENTINEL_PORT": str(GRPC_PORT),
        "SOVA_SENTINEL_DB_PATH": DB_PATH,
        "BITCOIN_CONFIRMATION_THRESHOLD": str(confirmation_threshold),
        "BITCOIN_REVERT_THRESHOLD": str(revert_threshold),
        "RUST_LOG": LOG_LEVEL,
    }
    optional = (
        ("BITCOIN_RPC_URL", config.bitcoin_rpc_url),
        ("BITCOIN_RPC_USER", config.bitcoin_rpc_user),
        ("BITCOIN_RPC_PASS", config.bitcoin_rpc_pass),
    )
    # Unset credentials are left out entirely, never sent as "".
    env.update({name: value for name, value in optional if value})
    return env


def build_service_config(
    config: LauncherConfig,
    service_name: str,
    confirmation_threshold: int | None = None,
    revert_threshold: int | None = None,
    min_cpu: int = 0,
    max_cpu: int = 0,
    min_mem: int = 0,
    max_mem: int = 0,
    persistent: bool = False,
    tolerations: list[Toleration] | None = None,
    node_selectors: dict[str, str] | None = None,
    docker_cache_params: DockerCacheParams | None = None,
    image: str = SENTINEL_IMAGE,
) -> ServiceConfig:
    """Assemble the sentinel's service descriptor without submitting it."""
    image = rewrite_image(image, docker_cache_params, constants.CONTAINER_REGISTRY.ghcr)
    confirmations, reverts = resolve_thresholds(config, confirmation_threshold, revert_threshold)

    files: dict[str, Directory] = {}
    if persistent:
        files[DATA_DIR] = Directory(persistent_key=f"data-{service_name}", size=PERSISTENT_VOLUME_SIZE)

    labels = label_maker(
        client=SENTINEL_CLIENT,
        client_type=constants.CLIENT_TYPES.sentinel,
        image=image[-constants.MAX_LABEL_LENGTH :],
        connected_client="",
        extra_labels={},
        supernode=False,
    )

    return ServiceConfig(
        image=image,
        ports=dict(USED_PORTS),
        env_vars=sentinel_env_vars(config, confirmations, reverts),
        files=files,
        min_cpu=min_cpu,
        max_cpu=max_cpu,
        min_memory=min_mem,
        max_memory=max_mem,
        labels=labels,
        tolerations=list(tolerations or []),
        node_selectors=dict(node_selectors or {}),
    )


def launch_sentinel(
    plan: Plan,
    config: LauncherConfig,
    service_name: str,
    confirmation_threshold: int | None = None,
    revert_threshold: int | None = None,
    min_cpu: int = 0,
    max_cpu: int = 0,
    min_mem: int = 0,
    max_mem: int = 0,
    persistent: bool = False,
    tolerations: list[Toleration] | None = None,
    node_selectors: dict[str, str] | None = None,
    docker_cache_params: DockerCacheParams | None = None,
    image: str = SENTINEL_IMAGE,
) -> ServiceHandle:
    """Start one sentinel on `plan` and return its handle.

    The plan is called exactly once. Whatever it raises reaches the caller as is.
    """
    service_config = build_service_config(
        config,
        service_name,
        confirmation_threshold=confirmation_threshold,
        revert_threshold=revert_threshold,
        min_cpu=min_cpu,
        max_cpu=max_cpu,
        min_mem=min_mem,
        max_mem=max_mem,
        persistent=persistent,
        tolerations=tolerations,
        node_selectors=node_selectors,
        docker_cache_params=docker_cache_params,
        image=image,
    )
    logger.info("Launching sentinel %s from %s", service_name, service_config.image)

    service = plan.add_service(service_name, service_config)

    metrics_info = new_metrics_info(service_name, METRICS_PATH, f"{service.ip_address}:{METRICS_PORT}")
    return ServiceHandle(
        service_name=service_name,
        ip_address=service.ip_address,
        grpc_port=GRPC_PORT,
        metrics_info=metrics_info,
        grpc_url=f"http://{service.ip_address}:{GRPC_PORT}",
    )
