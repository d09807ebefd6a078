from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict

import requests

from sovanet.log import setup_logging
from sovanet.plan import DockerPlan
from sovanet.sentinel import build_service_config
from sovanet.settings import settings
from sovanet.topology import launch_additional_services, load_topology, sentinel_launch_kwargs


def _print(obj) -> None:
    print(json.dumps(obj, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Sova testnet launcher CLI")
    p.add_argument("--api", default=settings.api_url, help="API base URL")
    p.add_argument("--log-level", default=None, help="Override SOVANET_LOG_LEVEL")
    sub = p.add_subparsers(dest="cmd", required=True)

    s_render = sub.add_parser("render", help="Print the sentinel service descriptor without launching it")
    s_render.add_argument("--topology", default=settings.topology_path)

    s_up = sub.add_parser("up", help="Launch the topology's additional services on local docker")
    s_up.add_argument("--topology", default=settings.topology_path)
    s_up.add_argument("--network", default=settings.docker_network)

    sub.add_parser("list", help="List sentinels launched through the API")

    s_launch = sub.add_parser("launch", help="Launch a sentinel through the API")
    s_launch.add_argument("--name", required=True)
    s_launch.add_argument("--image", default=None)
    s_launch.add_argument("--confirmation-threshold", type=int, default=None)
    s_launch.add_argument("--revert-threshold", type=int, default=None)
    s_launch.add_argument("--min-cpu", type=int, default=0, help="millicores")
    s_launch.add_argument("--max-cpu", type=int, default=0, help="millicores")
    s_launch.add_argument("--min-mem", type=int, default=0, help="MB")
    s_launch.add_argument("--max-mem", type=int, default=0, help="MB")
    s_launch.add_argument("--persistent", action="store_true", default=None, help="Default: SOVANET_PERSISTENT on the server")
    s_launch.add_argument("--cache-url", default=None, help="Pull ghcr images through this cache mirror")

    s_rm = sub.add_parser("remove", help="Remove a sentinel launched through the API")
    s_rm.add_argument("name")

    args = p.parse_args(argv)
    setup_logging(args.log_level)

    base = args.api.rstrip("/")

    if args.cmd == "render":
        topology = load_topology(args.topology)
        _print(asdict(build_service_config(**sentinel_launch_kwargs(topology))))
        return 0

    if args.cmd == "up":
        topology = load_topology(args.topology)
        handles = launch_additional_services(DockerPlan(network=args.network), topology)
        _print({name: asdict(h) for name, h in handles.items()})
        return 0

    if args.cmd == "list":
        _print(requests.get(f"{base}/sentinels", timeout=10).json())
        return 0

    if args.cmd == "launch":
        payload = {
            "service_name": args.name,
            "confirmation_threshold": args.confirmation_threshold,
            "revert_threshold": args.revert_threshold,
            "min_cpu": args.min_cpu,
            "max_cpu": args.max_cpu,
            "min_mem": args.min_mem,
            "max_mem": args.max_mem,
            "persistent": args.persistent,
        }
        if args.image:
            payload["image"] = args.image
        if args.cache_url:
            payload["docker_cache"] = {"enabled": True, "url": args.cache_url}
        r = requests.post(f"{base}/sentinels", json=payload, timeout=60)
        _print(r.json())
        return 0 if r.ok else 1

    if args.cmd == "remove":
        r = requests.delete(f"{base}/sentinels/{args.name}", timeout=30)
        _print(r.json())
        return 0 if r.ok else 1

    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
