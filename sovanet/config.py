from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CONFIRMATION_THRESHOLD = 6
DEFAULT_REVERT_THRESHOLD = 18


@dataclass(frozen=True)
class LauncherConfig:
    """Sentinel settings shared by every launch in one environment.

    The Bitcoin RPC fields are optional; a field left empty is simply not
    handed to the sentinel process.
    """

    bitcoin_rpc_url: str | None = None
    bitcoin_rpc_user: str | None = None
    bitcoin_rpc_pass: str | None = None
    # Blocks before a slot unlocks.
    confirmation_threshold: int = DEFAULT_CONFIRMATION_THRESHOLD
    # Blocks after which a locked slot counts as reverted.
    revert_threshold: int = DEFAULT_REVERT_THRESHOLD


def get_config(
    bitcoin_rpc_url: str | None = None,
    bitcoin_rpc_user: str | None = None,
    bitcoin_rpc_pass: str | None = None,
    confirmation_threshold: int | None = None,
    revert_threshold: int | None = None,
) -> LauncherConfig:
    """Build a LauncherConfig. Thresholds left as None take the defaults (6 and 18).

    No cross-field validation happens here: any combination is accepted.
    """
    return LauncherConfig(
        bitcoin_rpc_url=bitcoin_rpc_url,
        bitcoin_rpc_user=bitcoin_rpc_user,
        bitcoin_rpc_pass=bitcoin_rpc_pass,
        confirmation_threshold=(
            DEFAULT_CONFIRMATION_THRESHOLD if confirmation_threshold is None else confirmation_threshold
        ),
        revert_threshold=DEFAULT_REVERT_THRESHOLD if revert_threshold is None else revert_threshold,
    )


@dataclass(frozen=True)
class DockerCacheParams:
    """Pull-through cache mirror. Disabled unless `enabled` and `url` are set."""

    enabled: bool = False
    url: str = ""
    dockerhub_prefix: str = "/dh/"
    github_prefix: str = "/gh/"
    google_prefix: str = "/gcr/"
