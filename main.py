from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from docker.errors import DockerException
from fastapi import FastAPI, HTTPException

from sovanet.api_models import LaunchSentinelRequest
from sovanet.config import LauncherConfig
from sovanet.log import setup_logging
from sovanet.plan import DockerPlan, Plan
from sovanet.runtime import RuntimeState
from sovanet.sentinel import launch_sentinel
from sovanet.settings import settings

logger = logging.getLogger(__name__)


def create_app(plan: Plan | None = None, launcher_config: LauncherConfig | None = None) -> FastAPI:
    """Control API for launching sentinels onto a plan (Docker unless told otherwise)."""
    app = FastAPI(title="Sova testnet launcher")
    app.state.plan = plan if plan is not None else DockerPlan()
    app.state.launcher_config = launcher_config if launcher_config is not None else settings.launcher_config()
    app.state.runtime = RuntimeState()

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "healthy"}

    @app.get("/sentinels")
    def list_sentinels() -> list[dict[str, Any]]:
        return [asdict(h) for h in app.state.runtime.list_handles()]

    @app.get("/sentinels/{name}")
    def get_sentinel(name: str) -> dict[str, Any]:
        handle = app.state.runtime.get(name)
        if handle is None:
            raise HTTPException(status_code=404, detail=f"Unknown sentinel '{name}'")
        return asdict(handle)

    @app.post("/sentinels", status_code=201)
    def create_sentinel(req: LaunchSentinelRequest) -> dict[str, Any]:
        runtime: RuntimeState = app.state.runtime
        if not runtime.reserve(req.service_name):
            raise HTTPException(status_code=409, detail=f"Sentinel '{req.service_name}' already launched")
        persistent = req.persistent if req.persistent is not None else settings.persistent
        try:
            handle = launch_sentinel(
                app.state.plan,
                app.state.launcher_config,
                req.service_name,
                confirmation_threshold=req.confirmation_threshold,
                revert_threshold=req.revert_threshold,
                min_cpu=req.min_cpu,
                max_cpu=req.max_cpu,
                min_mem=req.min_mem,
                max_mem=req.max_mem,
                persistent=persistent,
                tolerations=[t.to_toleration() for t in req.tolerations],
                node_selectors=req.node_selectors,
                docker_cache_params=req.docker_cache.to_params() if req.docker_cache else None,
                image=req.image,
            )
        except ValueError as e:
            runtime.release(req.service_name)
            raise HTTPException(status_code=400, detail=str(e)) from e
        except (RuntimeError, DockerException) as e:
            runtime.release(req.service_name)
            logger.error("Launching %s failed: %s: %s", req.service_name, type(e).__name__, e)
            raise HTTPException(status_code=502, detail=f"{type(e).__name__}: {e}") from e
        except Exception:
            runtime.release(req.service_name)
            raise
        runtime.add(handle)
        return asdict(handle)

    @app.delete("/sentinels/{name}")
    def delete_sentinel(name: str) -> dict[str, str]:
        runtime: RuntimeState = app.state.runtime
        # A launch that failed half way can leave a container behind without a
        # handle, so the plan is asked even for names the registry does not know.
        try:
            removed = app.state.plan.remove_service(name)
        except (RuntimeError, DockerException) as e:
            raise HTTPException(status_code=502, detail=f"{type(e).__name__}: {e}") from e
        if runtime.remove(name) is None and not removed:
            raise HTTPException(status_code=404, detail=f"Unknown sentinel '{name}'")
        return {"removed": name}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    setup_logging()
    uvicorn.run(app, host="0.0.0.0", port=8000)
