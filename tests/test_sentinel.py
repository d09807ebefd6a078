import pytest

from sovanet.config import DockerCacheParams, get_config
from sovanet.constants import NODE_LABELS
from sovanet.descriptor import Directory, PortSpec, Toleration
from sovanet.sentinel import (
    DATA_DIR,
    DB_PATH,
    GRPC_PORT,
    METRICS_PATH,
    METRICS_PORT,
    SENTINEL_IMAGE,
    build_service_config,
    launch_sentinel,
    resolve_thresholds,
)

CREDENTIAL_VARS = ("BITCOIN_RPC_URL", "BITCOIN_RPC_USER", "BITCOIN_RPC_PASS")


def test_launch_with_defaults(plan):
    handle = launch_sentinel(plan, get_config(), "sentinel-1")

    assert len(plan.submissions) == 1
    name, cfg = plan.submissions[0]
    assert name == "sentinel-1"
    assert cfg.image == SENTINEL_IMAGE
    assert cfg.ports == {"grpc": PortSpec(number=50051, transport_protocol="TCP", application_protocol="grpc")}
    assert cfg.env_vars["SOVA_SENTINEL_PORT"] == "50051"
    assert cfg.env_vars["SOVA_SENTINEL_HOST"] == "0.0.0.0"
    assert cfg.env_vars["SOVA_SENTINEL_DB_PATH"] == DB_PATH
    assert cfg.env_vars["BITCOIN_CONFIRMATION_THRESHOLD"] == "6"
    assert cfg.env_vars["BITCOIN_REVERT_THRESHOLD"] == "18"
    assert cfg.env_vars["RUST_LOG"] == "debug"
    for var in CREDENTIAL_VARS:
        assert var not in cfg.env_vars
    assert cfg.files == {}
    assert cfg.tolerations == []
    assert cfg.node_selectors == {}

    assert handle.service_name == "sentinel-1"
    assert handle.ip_address == "10.0.0.7"
    assert handle.grpc_port == GRPC_PORT
    assert handle.grpc_url == "http://10.0.0.7:50051"


def test_metrics_info_points_at_unexposed_metrics_port(plan):
    handle = launch_sentinel(plan, get_config(), "sentinel-1")
    _, cfg = plan.submissions[0]

    assert handle.metrics_info.name == "sentinel-1"
    assert handle.metrics_info.path == METRICS_PATH
    assert handle.metrics_info.url == f"10.0.0.7:{METRICS_PORT}"
    assert all(p.number != METRICS_PORT for p in cfg.ports.values())


@pytest.mark.parametrize(
    "overrides,expected",
    [
        ((None, None), (6, 18)),
        ((10, None), (10, 18)),
        ((None, 30), (6, 30)),
        ((2, 4), (2, 4)),
    ],
)
def test_threshold_overrides_win(overrides, expected):
    assert resolve_thresholds(get_config(), *overrides) == expected


def test_threshold_override_reaches_env(plan):
    launch_sentinel(plan, get_config(confirmation_threshold=3, revert_threshold=9), "sentinel-1", confirmation_threshold=10)
    _, cfg = plan.submissions[0]
    assert cfg.env_vars["BITCOIN_CONFIRMATION_THRESHOLD"] == "10"
    assert cfg.env_vars["BITCOIN_REVERT_THRESHOLD"] == "9"


def test_credentials_included_only_when_set():
    cfg = build_service_config(
        get_config(bitcoin_rpc_url="http://btc:18443", bitcoin_rpc_user="", bitcoin_rpc_pass="secret"),
        "sentinel-1",
    )
    assert cfg.env_vars["BITCOIN_RPC_URL"] == "http://btc:18443"
    assert cfg.env_vars["BITCOIN_RPC_PASS"] == "secret"
    assert "BITCOIN_RPC_USER" not in cfg.env_vars


def test_all_credentials_present():
    cfg = build_service_config(
        get_config(bitcoin_rpc_url="http://btc:18443", bitcoin_rpc_user="user", bitcoin_rpc_pass="password"),
        "sentinel-1",
    )
    assert [cfg.env_vars[v] for v in CREDENTIAL_VARS] == ["http://btc:18443", "user", "password"]


def test_persistent_declares_one_volume():
    cfg = build_service_config(get_config(), "sentinel-1", persistent=True)
    assert cfg.files == {DATA_DIR: Directory(persistent_key="data-sentinel-1", size=1000)}
    assert cfg.env_vars["SOVA_SENTINEL_DB_PATH"].startswith(DATA_DIR + "/")


def test_resources_and_scheduling_passed_through():
    toleration = Toleration(key="dedicated", value="sentinel", effect="NoSchedule")
    cfg = build_service_config(
        get_config(),
        "sentinel-1",
        min_cpu=100,
        max_cpu=1000,
        min_mem=128,
        max_mem=512,
        tolerations=[toleration],
        node_selectors={"kubernetes.io/arch": "amd64"},
    )
    assert (cfg.min_cpu, cfg.max_cpu, cfg.min_memory, cfg.max_memory) == (100, 1000, 128, 512)
    assert cfg.tolerations == [toleration]
    assert cfg.node_selectors == {"kubernetes.io/arch": "amd64"}


def test_cache_rewrites_image_and_label():
    cache = DockerCacheParams(enabled=True, url="cache.sova.internal")
    cfg = build_service_config(get_config(), "sentinel-1", docker_cache_params=cache)
    assert cfg.image == "cache.sova.internal/gh/sovanetwork/sova-sentinel:latest"
    assert cfg.labels[NODE_LABELS["image"]] == "cache.sova.internal-gh-sovanetwork-sova-sentinel-latest"


def test_cache_leaves_non_ghcr_image():
    cache = DockerCacheParams(enabled=True, url="cache.sova.internal")
    cfg = build_service_config(get_config(), "sentinel-1", docker_cache_params=cache, image="sova/sentinel:dev")
    assert cfg.image == "sova/sentinel:dev"


def test_labels_identify_sentinel():
    cfg = build_service_config(get_config(), "sentinel-1")
    assert cfg.labels[NODE_LABELS["client"]] == "sova-sentinel"
    assert cfg.labels[NODE_LABELS["client_type"]] == "sentinel"
    assert cfg.labels[NODE_LABELS["connected_client"]] == ""
    assert cfg.labels[NODE_LABELS["supernode"]] == "false"


def test_plan_failure_propagates_without_retry(failing_plan):
    fp = failing_plan(RuntimeError("submission rejected"))
    with pytest.raises(RuntimeError, match="submission rejected"):
        launch_sentinel(fp, get_config(), "sentinel-1")
    assert len(fp.submissions) == 1
