"""Shared test fixtures for subweight."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

WEIGHTS = Path(__file__).parent / "fixtures" / "weights"

# Path of the weight files inside the repository built by ``weights_repo``.
REPO_WEIGHTS_DIR = "runtime/test/src/weights"


@pytest.fixture
def old_weights() -> Path:
    """pallet_balances.rs with transfer, set_balance and upgrade_accounts."""
    return WEIGHTS / "old" / "pallet_balances.rs"


@pytest.fixture
def new_weights() -> Path:
    """pallet_balances.rs with transfer, set_balance and force_unreserve."""
    return WEIGHTS / "new" / "pallet_balances.rs"


@pytest.fixture
def legacy_weights() -> Path:
    """pallet_staking.rs in the pre two-dimensional ``as Weight`` style."""
    return WEIGHTS / "legacy" / "pallet_staking.rs"


@pytest.fixture
def no_impl_weights() -> Path:
    return WEIGHTS / "invalid" / "no_impl.rs"


@pytest.fixture
def broken_weights() -> Path:
    return WEIGHTS / "invalid" / "broken.rs"


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run without picking up the user's config files or SUBWEIGHT_* variables."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in list(os.environ):
        if key.startswith("SUBWEIGHT_"):
            monkeypatch.delenv(key)
    return work


def _git(repo: Path, *args: str) -> None:
    subprocess.run(
        [
            "git",
            "-c", "user.name=subweight",
            "-c", "user.email=subweight@example.com",
            "-c", "commit.gpgsign=false",
            "-c", "tag.gpgsign=false",
            *args,
        ],
        cwd=str(repo),
        check=True,
        capture_output=True,
    )


@pytest.fixture
def weights_repo(tmp_path, old_weights, new_weights):
    """A git repository with tags v1 (old weights) and v2 (new weights)."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    weights = repo / REPO_WEIGHTS_DIR
    weights.mkdir(parents=True)
    _git(repo, "init", "-q")

    (weights / "mod.rs").write_text("pub mod pallet_balances;\n")
    shutil.copy(old_weights, weights / "pallet_balances.rs")
    _git(repo, "add", "-A")
    _git(repo, "commit", "-q", "-m", "old weights")
    _git(repo, "tag", "v1")

    shutil.copy(new_weights, weights / "pallet_balances.rs")
    _git(repo, "add", "-A")
    _git(repo, "commit", "-q", "-m", "new weights")
    _git(repo, "tag", "v2")
    return repo
