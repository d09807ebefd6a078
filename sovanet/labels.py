from __future__ import annotations

import re

from .constants import MAX_LABEL_LENGTH, NODE_LABELS

_UNSAFE_LABEL_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def _label_value(value: str) -> str:
    # Kubernetes label values: alphanumerics, '-', '_', '.', starting and
    # ending with an alphanumeric.
    value = _UNSAFE_LABEL_CHARS.sub("-", value)[-MAX_LABEL_LENGTH:]
    return value.strip("-_.")


def label_maker(
    client: str,
    client_type: str,
    image: str,
    connected_client: str,
    extra_labels: dict[str, str],
    supernode: bool = False,
) -> dict[str, str]:
    """Classification labels attached to every launched service."""
    labels = {
        NODE_LABELS["client_type"]: client_type,
        NODE_LABELS["client"]: client,
        NODE_LABELS["image"]: _label_value(image),
        NODE_LABELS["connected_client"]: connected_client,
        NODE_LABELS["supernode"]: str(supernode).lower(),
    }
    labels.update(extra_labels)
    return labels
