"""Service descriptor handed to an orchestration plan.

These records describe *what* should run; a plan decides how.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .constants import TCP_PROTOCOL

SERVICE_NAME_RE = re.compile(r"^[a-z][a-z0-9\-]{0,62}$")


def validate_service_name(name: str) -> None:
    if not SERVICE_NAME_RE.match(name):
        raise ValueError(
            "Invalid service name. Use lowercase letters/numbers and hyphen, starting with a letter (max 63 chars)."
        )


@dataclass(frozen=True)
class PortSpec:
    number: int
    transport_protocol: str = TCP_PROTOCOL
    application_protocol: str = ""


@dataclass(frozen=True)
class Directory:
    """Named persistent volume; `size` is in MB."""

    persistent_key: str
    size: int


@dataclass(frozen=True)
class Toleration:
    key: str = ""
    operator: str = "Equal"
    value: str = ""
    effect: str = ""
    toleration_seconds: int | None = None


@dataclass(frozen=True)
class ServiceConfig:
    image: str
    ports: dict[str, PortSpec] = field(default_factory=dict)
    env_vars: dict[str, str] = field(default_factory=dict)
    files: dict[str, Directory] = field(default_factory=dict)  # mount path -> directory
    # 0 means unbounded. CPU in millicores, memory in MB.
    min_cpu: int = 0
    max_cpu: int = 0
    min_memory: int = 0
    max_memory: int = 0
    labels: dict[str, str] = field(default_factory=dict)
    tolerations: list[Toleration] = field(default_factory=list)
    node_selectors: dict[str, str] = field(default_factory=dict)
