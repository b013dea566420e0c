# vendorsync Test Fixtures
# Pytest fixtures for vendorsync tests

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def workdir(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside a fresh working directory."""
    work = temp_dir / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.delenv("VENDORSYNC_CONFIG", raising=False)
    return work


@pytest.fixture
def source_tree(temp_dir: Path) -> Path:
    """Create a local directory to vendor from."""
    src = temp_dir / "upstream"
    (src / "sub").mkdir(parents=True)
    (src / "a.txt").write_text("alpha\n", encoding="utf-8")
    (src / "b.log").write_text("log line\n", encoding="utf-8")
    (src / "sub" / "c.txt").write_text("gamma\n", encoding="utf-8")
    (src / "LICENSE").write_text("MIT\n", encoding="utf-8")
    return src


@pytest.fixture
def sample_config(source_tree: Path) -> dict:
    """Create sample configuration dict."""
    return {
        "directories": [
            {
                "path": "vendor",
                "contents": [
                    {
                        "path": "lib",
                        "directory": {"path": str(source_tree)},
                        "include_paths": ["*.txt"],
                        "exclude_paths": ["sub/*"],
                    },
                    {
                        "path": "all",
                        "directory": {"path": str(source_tree)},
                    },
                ],
            },
        ],
        "options": {"http_timeout": 5},
        "output": {"verbose": False, "colored": False},
    }


@pytest.fixture
def config_file(workdir: Path, sample_config: dict) -> Path:
    """Create a configuration file in the working directory."""
    config_path = workdir / "vendorsync.yml"

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(sample_config, f, default_flow_style=False)

    return config_path


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create files (relative path -> content) below root."""
    for rel_path, content in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def list_tree(root: Path) -> list[str]:
    """List all files below root as sorted relative posix paths."""
    return sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file() or p.is_symlink())


@pytest.fixture
def make_tree():
    """Factory fixture creating files below a root."""
    return write_tree


@pytest.fixture
def tree_files():
    """Factory fixture listing files below a root."""
    return list_tree
