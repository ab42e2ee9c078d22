from __future__ import annotations

from pathlib import Path

import pytest

from thorfix.config import MAX_PATCH_BYTES_ENV, load_settings
from thorfix.patching import PatchFormat, PatchValidationError
from thorfix.patching.service import DEFAULT_MAX_PATCH_BYTES


def test_load_settings_defaults(tmp_path: Path) -> None:
    settings = load_settings({}, tmp_path / "config.yaml", env={})

    assert settings.root == tmp_path.resolve()
    assert settings.default_format is PatchFormat.BLOCK
    assert settings.max_patch_bytes == DEFAULT_MAX_PATCH_BYTES


def test_repo_root_is_relative_to_config_file(tmp_path: Path) -> None:
    config = {"project": {"repo_root": "checkout/repo"}, "patching": {"default_format": "unified"}}

    settings = load_settings(config, tmp_path / "config.yaml", env={})

    assert settings.root == (tmp_path / "checkout" / "repo").resolve()
    assert settings.default_format is PatchFormat.UNIFIED


def test_patch_limit_prefers_config_over_environment(tmp_path: Path) -> None:
    env_only = load_settings({}, tmp_path / "config.yaml", env={MAX_PATCH_BYTES_ENV: "512"})
    both = load_settings(
        {"patching": {"max_patch_bytes": "2048"}},
        tmp_path / "config.yaml",
        env={MAX_PATCH_BYTES_ENV: "512"},
    )
    invalid = load_settings({"patching": {"max_patch_bytes": -4}}, tmp_path / "config.yaml", env={MAX_PATCH_BYTES_ENV: "zero"})

    assert env_only.max_patch_bytes == 512
    assert both.max_patch_bytes == 2048
    assert invalid.max_patch_bytes == DEFAULT_MAX_PATCH_BYTES


def test_unknown_default_format_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(PatchValidationError):
        load_settings({"patching": {"default_format": "guess"}}, tmp_path / "config.yaml", env={})
