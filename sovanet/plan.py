from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import docker
from docker.errors import DockerException, NotFound

from .constants import LABEL_PREFIX
from .descriptor import PortSpec, ServiceConfig, validate_service_name
from .settings import settings

logger = logging.getLogger(__name__)

PLAN_LABEL = f"{LABEL_PREFIX}.service"


@dataclass(frozen=True)
class Service:
    """A service the plan started. `ip_address` is only known after launch."""

    name: str
    ip_address: str
    hostname: str
    ports: dict[str, PortSpec] = field(default_factory=dict)


class Plan(Protocol):
    def add_service(self, name: str, config: ServiceConfig) -> Service: ...

    def remove_service(self, name: str) -> bool: ...


def _resource_kwargs(config: ServiceConfig) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if config.max_cpu > 0:
        kwargs["nano_cpus"] = config.max_cpu * 1_000_000
    if config.min_cpu > 0:
        # Docker has no CPU floor; shares are the closest relative weight (1024 == 1 core).
        kwargs["cpu_shares"] = max(2, config.min_cpu * 1024 // 1000)
    if config.max_memory > 0:
        kwargs["mem_limit"] = f"{config.max_memory}m"
    if config.min_memory > 0:
        kwargs["mem_reservation"] = f"{config.min_memory}m"
    return kwargs


def _port_bindings(ports: dict[str, PortSpec]) -> dict[str, None]:
    # None lets docker pick a free host port.
    return {f"{p.number}/{p.transport_protocol.lower()}": None for p in ports.values()}


class DockerPlan:
    """Runs service descriptors as containers on the local Docker engine.

    Each service becomes one container on a shared bridge network, named after
    the service so the name doubles as its hostname on that network.
    """

    def __init__(self, network: str | None = None):
        self.network = network or settings.docker_network

    def _client(self) -> docker.DockerClient:
        return docker.from_env()

    def docker_available(self) -> bool:
        try:
            c = self._client()
            c.ping()
            return True
        except DockerException:
            return False

    def ensure_network(self) -> None:
        c = self._client()
        try:
            c.networks.get(self.network)
        except NotFound:
            c.networks.create(self.network, driver="bridge")
            logger.info("Created docker network '%s'", self.network)

    def _volumes(self, name: str, config: ServiceConfig) -> dict[str, dict[str, str]]:
        c = self._client()
        volumes: dict[str, dict[str, str]] = {}
        for mount_path, directory in config.files.items():
            # The local driver cannot enforce a size; keep it on the volume for reference.
            c.volumes.create(
                name=directory.persistent_key,
                driver="local",
                labels={PLAN_LABEL: name, f"{LABEL_PREFIX}.size-mb": str(directory.size)},
            )
            volumes[directory.persistent_key] = {"bind": mount_path, "mode": "rw"}
        return volumes

    def add_service(self, name: str, config: ServiceConfig) -> Service:
        validate_service_name(name)
        if not self.docker_available():
            raise RuntimeError("Docker is not available. Start the docker daemon and try again.")
        self.ensure_network()

        if config.tolerations or config.node_selectors:
            logger.warning("Service %s: tolerations and node selectors are ignored by the docker backend", name)

        c = self._client()
        container = c.containers.run(
            config.image,
            detach=True,
            name=name,
            hostname=name,
            environment=dict(config.env_vars),
            labels={**config.labels, PLAN_LABEL: name},
            network=self.network,
            ports=_port_bindings(config.ports),
            volumes=self._volumes(name, config),
            restart_policy={"Name": "no"},
            **_resource_kwargs(config),
        )
        container.reload()
        ip_address = container.attrs["NetworkSettings"]["Networks"][self.network]["IPAddress"]

        logger.info("Started container %s from image %s at %s", name, config.image, ip_address)
        return Service(name=name, ip_address=ip_address, hostname=name, ports=dict(config.ports))

    def remove_service(self, name: str) -> bool:
        """Remove the container named `name`. False if there was none."""
        c = self._client()
        try:
            c.containers.get(name).remove(force=True)
        except NotFound:
            return False
        logger.info("Removed container %s", name)
        return True
