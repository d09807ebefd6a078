from __future__ import annotations

from .config import DockerCacheParams
from .constants import CONTAINER_REGISTRY


def _registry_prefix(cache: DockerCacheParams, registry: str) -> str:
    prefixes = {
        CONTAINER_REGISTRY.dockerhub: cache.dockerhub_prefix,
        CONTAINER_REGISTRY.ghcr: cache.github_prefix,
        CONTAINER_REGISTRY.gcr: cache.google_prefix,
    }
    if registry not in prefixes:
        raise ValueError(f"Unknown container registry: {registry!r}")
    return prefixes[registry]


def rewrite_image(
    image: str,
    cache: DockerCacheParams | None,
    registry: str = CONTAINER_REGISTRY.ghcr,
) -> str:
    """Route `image` through the pull-through cache when it lives on `registry`.

    `ghcr.io/org/name:tag` becomes `<cache.url><github_prefix>org/name:tag`.
    Images from any other registry, or a disabled cache, pass through unchanged.
    """
    if cache is None or not cache.enabled:
        return image
    if not image.startswith(registry + "/"):
        return image
    path = "/".join(image.split("/")[1:])
    return cache.url + _registry_prefix(cache, registry) + path
