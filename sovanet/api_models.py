from __future__ import annotations

from pydantic import BaseModel, Field

from .config import DockerCacheParams
from .descriptor import Toleration
from .sentinel import SENTINEL_IMAGE


class TolerationModel(BaseModel):
    key: str = ""
    operator: str = "Equal"
    value: str = ""
    effect: str = ""
    toleration_seconds: int | None = None

    def to_toleration(self) -> Toleration:
        return Toleration(**self.model_dump())


class DockerCacheParamsModel(BaseModel):
    enabled: bool = False
    url: str = ""
    dockerhub_prefix: str = "/dh/"
    github_prefix: str = "/gh/"
    google_prefix: str = "/gcr/"

    def to_params(self) -> DockerCacheParams:
        return DockerCacheParams(**self.model_dump())


class LaunchSentinelRequest(BaseModel):
    service_name: str = Field(..., description="Unique service name (dns-safe)")
    image: str = Field(SENTINEL_IMAGE, description="Container image (name:tag)")
    confirmation_threshold: int | None = Field(None, ge=1, description="Overrides the server default")
    revert_threshold: int | None = Field(None, ge=1, description="Overrides the server default")
    min_cpu: int = Field(0, ge=0, description="millicores, 0 = unbounded")
    max_cpu: int = Field(0, ge=0, description="millicores, 0 = unbounded")
    min_mem: int = Field(0, ge=0, description="MB, 0 = unbounded")
    max_mem: int = Field(0, ge=0, description="MB, 0 = unbounded")
    persistent: bool | None = Field(None, description="Defaults to SOVANET_PERSISTENT")
    tolerations: list[TolerationModel] = Field(default_factory=list)
    node_selectors: dict[str, str] = Field(default_factory=dict)
    docker_cache: DockerCacheParamsModel | None = Field(None, description="Pull-through cache for ghcr images")
