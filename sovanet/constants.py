"""Values shared by the launchers: registries, label keys and client tags."""

from __future__ import annotations

from types import SimpleNamespace

CONTAINER_REGISTRY = SimpleNamespace(
    dockerhub="docker.io",
    ghcr="ghcr.io",
    gcr="gcr.io",
)

# Kubernetes label value limit.
MAX_LABEL_LENGTH = 63

LABEL_PREFIX = "sovanet"

NODE_LABELS = {
    "client_type": f"{LABEL_PREFIX}.client-type",
    "client": f"{LABEL_PREFIX}.client",
    "image": f"{LABEL_PREFIX}.client-image",
    "connected_client": f"{LABEL_PREFIX}.connected-client",
    "supernode": f"{LABEL_PREFIX}.supernode",
}

CLIENT_TYPES = SimpleNamespace(
    sentinel="sentinel",
)

TCP_PROTOCOL = "TCP"

# Unit of Directory.size
MB = 1
GB = 1000 * MB
