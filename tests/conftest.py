import pytest
from docker.errors import DockerException, NotFound

from sovanet.plan import DockerPlan, Service


class FakePlan:
    """Records submissions instead of starting anything."""

    def __init__(self, ip_address: str = "10.0.0.7"):
        self.ip_address = ip_address
        self.submissions = []
        self.removed = []

    def add_service(self, name, config):
        self.submissions.append((name, config))
        return Service(name=name, ip_address=self.ip_address, hostname=name, ports=dict(config.ports))

    def remove_service(self, name):
        started = any(n == name for n, _ in self.submissions)
        if started:
            self.removed.append(name)
        return started


class FailingPlan(FakePlan):
    def __init__(self, exc: Exception):
        super().__init__()
        self.exc = exc

    def add_service(self, name, config):
        self.submissions.append((name, config))
        raise self.exc


class _Container:
    def __init__(self, network: str, ip: str):
        self.attrs = {"NetworkSettings": {"Networks": {network: {"IPAddress": ip}}}}
        self.removed = False

    def reload(self):
        pass

    def remove(self, force=False):
        self.removed = True


class _Containers:
    def __init__(self):
        self.runs = []
        self.by_name = {}
        # Raised by run() after the container was created, like a failed start.
        self.fail_after_create = None

    def run(self, image, **kwargs):
        self.runs.append((image, kwargs))
        c = _Container(kwargs["network"], "172.20.0.5")
        self.by_name[kwargs["name"]] = c
        if self.fail_after_create is not None:
            raise self.fail_after_create
        return c

    def get(self, name):
        c = self.by_name.get(name)
        if c is None or c.removed:
            raise NotFound(f"No such container: {name}")
        return c


class _Networks:
    def __init__(self):
        self.created = []

    def get(self, name):
        if name not in self.created:
            raise NotFound(f"network {name} not found")
        return name

    def create(self, name, driver=None):
        self.created.append(name)


class _Volumes:
    def __init__(self):
        self.created = []

    def create(self, **kwargs):
        self.created.append(kwargs)


class FakeDockerClient:
    def __init__(self):
        self.reachable = True
        self.containers = _Containers()
        self.networks = _Networks()
        self.volumes = _Volumes()

    def ping(self):
        if not self.reachable:
            raise DockerException("daemon down")
        return True


@pytest.fixture
def plan():
    return FakePlan()


@pytest.fixture
def failing_plan():
    def _make(exc: Exception) -> FailingPlan:
        return FailingPlan(exc)

    return _make


@pytest.fixture
def fake_docker(monkeypatch):
    client = FakeDockerClient()
    monkeypatch.setattr(DockerPlan, "_client", lambda self: client)
    return client
