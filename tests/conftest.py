import time
from pathlib import Path

import pytest

from srcget.core.errors import GetterError
from srcget.core.models import Mode
from srcget.getters import default_getters
from srcget.getters.base import Getter
from srcget.services.group import Group


class RecordingGetter(Getter):
    """In-memory getter for tests: writes a marker file and counts fetches."""

    def __init__(self, name="fake", schemes=("fake",), fail=False, delay=0.0):
        self.name = name
        self.schemes = frozenset(schemes)
        self.fail = fail
        self.delay = delay
        self.calls = []

    def mode(self, url):
        return Mode.DIR

    def get(self, dst, url):
        self.calls.append((dst, url))
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise GetterError(f"{self.name} refused {url}")
        out = Path(dst)
        out.mkdir(parents=True, exist_ok=True)
        (out / "fetched.txt").write_text(url)

    def get_file(self, dst, url):
        self.get(str(Path(dst).parent), url)


@pytest.fixture
def getters():
    """The built-in getter tuple."""
    return default_getters()


@pytest.fixture
def group():
    return Group()


@pytest.fixture
def source_tree(tmp_path: Path):
    """A small local directory to fetch from."""
    root = tmp_path / "src"
    (root / "pkg-1.0" / "lib").mkdir(parents=True)
    (root / "README.md").write_text("hello\n")
    (root / "pkg-1.0" / "inner.txt").write_text("inner\n")
    (root / "pkg-1.0" / "lib" / "mod.py").write_text("x = 1\n")
    return root
