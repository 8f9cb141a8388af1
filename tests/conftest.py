import gc
import sys
import weakref
from pathlib import Path
from types import SimpleNamespace

import pytest

# pytest's importlib import mode leaves the repo root off sys.path.
REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


class FakeOsqp:
    """Stand-in for osqp.OSQP that records calls into a dict it does not own."""

    def __init__(self, calls, status_val, status, x=None, setup_error=None):
        self.calls = calls
        self.status_val = status_val
        self.status = status
        self.x = x
        self.setup_error = setup_error

    def setup(self, **kwargs):
        self.calls["setup"] = kwargs
        if self.setup_error is not None:
            raise self.setup_error()

    def warm_start(self, x):
        self.calls["warm_start"] = x

    def solve(self, **kwargs):
        self.calls.setdefault("solve", []).append(kwargs)
        info = SimpleNamespace(status_val=self.status_val, status=self.status, iter=12, run_time=1e-3)
        return SimpleNamespace(info=info, x=self.x)


class TrackingOsqpFactory:
    """
    Hands out FakeOsqp workspaces and keeps only weak references to them.
    setup_error is a zero-argument callable building the exception to raise, so
    no raised instance (and its traceback) outlives the call.
    """

    def __init__(self, status_val, status, x=None, setup_error=None):
        self.status_val = status_val
        self.status = status
        self.x = x
        self.setup_error = setup_error
        self.refs = []
        self.calls = []

    def __call__(self):
        calls = {}
        self.calls.append(calls)
        solver = FakeOsqp(calls, self.status_val, self.status, self.x, self.setup_error)
        self.refs.append(weakref.ref(solver))
        return solver

    def live(self):
        gc.collect()
        return [ref for ref in self.refs if ref() is not None]


@pytest.fixture
def tracking_osqp():
    return TrackingOsqpFactory
