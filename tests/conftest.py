from __future__ import annotations

import sys
import textwrap
from dataclasses import dataclass
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@dataclass(slots=True)
class SampleRepo:
    """Fixture payload representing a working copy the agent edits."""

    root: Path
    config_path: Path

    def write(self, relative: str, content: str) -> Path:
        target = self.root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target


@pytest.fixture()
def sample_repo(tmp_path: Path) -> SampleRepo:
    """Create a small repository root with a config file living beside it."""

    repo_root = tmp_path / "repository"
    repo_root.mkdir()
    (repo_root / ".git").mkdir()
    (repo_root / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")

    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        textwrap.dedent(
            """
            project:
              repo_root: repository
            patching:
              default_format: block
              max_patch_bytes: 4096
            """
        ).lstrip(),
        encoding="utf-8",
    )
    return SampleRepo(root=repo_root, config_path=config_path)
