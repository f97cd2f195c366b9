"""Conftest for spawn_config plugin tests — path setup and fake engine objects."""
from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from loguru import logger

# Add plugins/ and src/ to path so `from spawn_config.xxx import ...` works
_plugins_dir = Path(__file__).resolve().parent.parent.parent
for _p in (_plugins_dir, _plugins_dir.parent / "src"):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))


class FakeInstance:
    """Engine entity stand-in recording which removal path was used."""

    def __init__(self, type_id: str, world=None, valid: bool = True, server: bool = True):
        self._type_id = type_id
        self._world = world
        self._valid = valid
        self._server = server
        self.kill_count = 0
        self.destroyed = False

    @property
    def type_id(self) -> str:
        return self._type_id

    @property
    def is_server(self) -> bool:
        return self._server

    def is_valid(self) -> bool:
        return self._valid and not self.destroyed

    def admin_kill(self) -> None:
        self.kill_count += 1
        self.destroyed = True
        if self._world is not None:
            self._world.discard(self)


class FakeWorld:
    """In-memory world holding FakeInstances."""

    def __init__(self) -> None:
        self.instances: list[FakeInstance] = []
        self.raw_destroyed: list[FakeInstance] = []
        self.snapshot_calls = 0

    def spawn(self, type_id: str, count: int = 1, **kwargs) -> list[FakeInstance]:
        created = [FakeInstance(type_id, world=self, **kwargs) for _ in range(count)]
        self.instances.extend(created)
        return created

    def live_instances(self) -> list[FakeInstance]:
        self.snapshot_calls += 1
        return list(self.instances)

    def destroy_object(self, instance: FakeInstance) -> None:
        self.raw_destroyed.append(instance)
        instance.destroyed = True
        self.discard(instance)

    def discard(self, instance: FakeInstance) -> None:
        if instance in self.instances:
            self.instances.remove(instance)

    def count(self, type_id: str) -> int:
        return sum(1 for i in self.instances if i.type_id == type_id)


class FakeManifest:
    """Pooled-string manifest stand-in."""

    def __init__(self, paths: list[str] | None = None) -> None:
        self.paths = list(paths or [])

    def iter_assets(self):
        for p in self.paths:
            yield SimpleNamespace(path=p)


class FixedRandom:
    """Random source that always returns the same draw."""

    def __init__(self, value: float) -> None:
        self.value = value
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        return self.value


ROCK_SMALL = "assets/bundled/prefabs/autospawn/resource/rock_small.prefab"
ROCK_LARGE = "assets/bundled/prefabs/autospawn/resource/rock_large.prefab"
HEMP = "assets/bundled/prefabs/autospawn/collectable/hemp/hemp-collectable.prefab"
CRYSTAL = "assets/bundled/prefabs/autospawn/resource/crystals/crystal_a.prefab"


@pytest.fixture
def world() -> FakeWorld:
    return FakeWorld()


@pytest.fixture
def manifest() -> FakeManifest:
    return FakeManifest([ROCK_SMALL, ROCK_LARGE, HEMP, CRYSTAL])


@pytest.fixture
def make_manifest():
    return FakeManifest


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def make_instance():
    return FakeInstance


@pytest.fixture
def prefabs() -> SimpleNamespace:
    return SimpleNamespace(
        rock_small=ROCK_SMALL, rock_large=ROCK_LARGE, hemp=HEMP, crystal=CRYSTAL
    )


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "SpawnConfig.json"


@pytest.fixture
def log_messages():
    """Capture loguru output at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(str(m)), level="WARNING")
    yield messages
    logger.remove(handler_id)
