import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'zcc' and tests/ importable as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from helpers.cache_utils import reset_zcc_caches


# Env vars that change where zcc looks for configuration. A developer shell
# that sets any of these must not leak into tests.
_LEAK_PRONE_ENV_KEYS = ["ZCC_PROJECT_ROOT", "ZCC_HOME"]


@pytest.fixture(autouse=True)
def _isolate_zcc_state(tmp_path_factory, monkeypatch):
    """Fresh caches, logging and user config dir for each test."""
    for key in list(os.environ):
        if key.startswith("ZCC_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("ZCC_HOME", str(tmp_path_factory.mktemp("zcc-home")))
    reset_zcc_caches()
    yield
    reset_zcc_caches()


@pytest.fixture
def isolated_project_env(tmp_path, monkeypatch):
    """Isolated project root with an empty ``.zcc/config`` directory.

    ``ZCC_PROJECT_ROOT`` points at ``tmp_path`` and the working directory is
    changed to it, so nothing a test does touches the real checkout.
    """
    monkeypatch.setenv("ZCC_PROJECT_ROOT", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".zcc" / "config").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest.fixture
def packs_dir(tmp_path):
    """Directory for hand-built starter packs, outside the project root."""
    path = tmp_path / "pack-library"
    path.mkdir()
    return path


@pytest.fixture
def project_root(isolated_project_env):
    return isolated_project_env
