from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MetricsInfo:
    """Where a scraper finds a service's metrics."""

    name: str
    path: str
    url: str  # host:port, no scheme
    config: dict[str, Any] | None = None


def new_metrics_info(name: str, path: str, url: str, config: dict[str, Any] | None = None) -> MetricsInfo:
    return MetricsInfo(name=name, path=path, url=url, config=config)
