import multiprocessing
import os
from concurrent.futures import Future

# The dispatcher tests fork; numba's TBB threading layer (started when rembg
# imports pymatting) deadlocks the parent at exit after a fork.
os.environ.setdefault("NUMBA_THREADING_LAYER", "workqueue")

import pytest
from PIL import Image

from nobg.config import Settings


@pytest.fixture
def settings():
    return Settings(poll_interval_seconds=0.02, drain_grace_seconds=0.2, start_method="fork")


@pytest.fixture
def fork_ctx():
    if "fork" not in multiprocessing.get_all_start_methods():
        pytest.skip("fork start method not available")
    return multiprocessing.get_context("fork")


@pytest.fixture
def make_file(tmp_path):
    """Write ``size`` bytes (sparse) to ``tmp_path/name`` and return its path."""
    def _make(name, size=1024, prefix=b""):
        path = tmp_path / name
        with open(path, "wb") as f:
            f.write(prefix)
            f.truncate(max(size, len(prefix)))
        return str(path)
    return _make


@pytest.fixture
def jpeg_path(tmp_path):
    path = tmp_path / "portrait.jpg"
    Image.new("RGB", (32, 24), (200, 30, 30)).save(path, format="JPEG")
    return str(path)


class FakeDialogs:
    def __init__(self, open_path=None, save_path=None):
        self.open_path = open_path
        self.save_path = save_path
        self.save_defaults = []

    def ask_open_path(self):
        return self.open_path

    def ask_save_path(self, default_name):
        self.save_defaults.append(default_name)
        return self.save_path


class FakeDispatcher:
    def __init__(self, result=None):
        self.result = result
        self.submitted = []
        self.listeners = []
        self.shut_down = False

    def submit(self, path):
        self.submitted.append(path)
        future = Future()
        future.set_result(self.result)
        return future

    def add_listener(self, listener):
        self.listeners.append(listener)

    def remove_listener(self, listener):
        self.listeners.remove(listener)

    def shutdown(self):
        self.shut_down = True


@pytest.fixture
def fake_dialogs():
    return FakeDialogs()


@pytest.fixture
def fake_dispatcher():
    return FakeDispatcher()
