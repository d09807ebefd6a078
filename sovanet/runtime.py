from __future__ import annotations

from threading import Lock

from .sentinel import ServiceHandle


class RuntimeState:
    """In-memory registry of the sentinels launched by this process."""

    def __init__(self) -> None:
        self.lock = Lock()
        self.handles: dict[str, ServiceHandle] = {}  # service name -> handle
        self.pending: set[str] = set()  # names with a launch in flight

    def reserve(self, name: str) -> bool:
        """Claim `name` for a launch. False if it is launched or already being launched."""
        with self.lock:
            if name in self.handles or name in self.pending:
                return False
            self.pending.add(name)
            return True

    def release(self, name: str) -> None:
        with self.lock:
            self.pending.discard(name)

    def add(self, handle: ServiceHandle) -> None:
        with self.lock:
            self.pending.discard(handle.service_name)
            self.handles[handle.service_name] = handle

    def get(self, name: str) -> ServiceHandle | None:
        with self.lock:
            return self.handles.get(name)

    def contains(self, name: str) -> bool:
        with self.lock:
            return name in self.handles

    def remove(self, name: str) -> ServiceHandle | None:
        with self.lock:
            return self.handles.pop(name, None)

    def list_handles(self) -> list[ServiceHandle]:
        with self.lock:
            return sorted(self.handles.values(), key=lambda h: h.service_name)
