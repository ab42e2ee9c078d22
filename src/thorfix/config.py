"""Patch engine settings derived from ``config.yaml`` and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .patching.service import DEFAULT_MAX_PATCH_BYTES, PatchFormat, coerce_format

DEFAULT_CONFIG_NAME = "config.yaml"
MAX_PATCH_BYTES_ENV = "THORFIX_MAX_PATCH_BYTES"

DEFAULT_CONFIG_TEMPLATE: dict[str, Any] = {
    "project": {
        "repo_root": ".",
    },
    "patching": {
        "default_format": PatchFormat.BLOCK.value,
        "max_patch_bytes": DEFAULT_MAX_PATCH_BYTES,
    },
}


@dataclass(slots=True)
class PatchSettings:
    """Resolved configuration for the patch tools."""

    root: Path
    default_format: PatchFormat = PatchFormat.BLOCK
    max_patch_bytes: int = DEFAULT_MAX_PATCH_BYTES


def _positive_int(value: Any) -> int | None:
    """Parse ``value`` as a positive integer, returning ``None`` otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return None
        return parsed if parsed > 0 else None
    return None


def resolve_repo_root(config: Mapping[str, Any], config_path: Path) -> Path:
    """Resolve the repository root from configuration, relative to the config file."""
    project_cfg = config.get("project") or {}
    repo_root_value = project_cfg.get("repo_root", ".") if isinstance(project_cfg, Mapping) else "."
    repo_root_path = Path(str(repo_root_value or "."))
    if not repo_root_path.is_absolute():
        repo_root_path = (config_path.parent / repo_root_path).resolve()
    return repo_root_path


def load_settings(
    config: Mapping[str, Any],
    config_path: Path,
    *,
    env: Mapping[str, str] | None = None,
) -> PatchSettings:
    """Interpret a parsed configuration mapping into :class:`PatchSettings`.

    ``max_patch_bytes`` comes from the config file when set, otherwise from
    ``THORFIX_MAX_PATCH_BYTES``, otherwise the built-in default.
    """
    env_mapping = os.environ if env is None else env
    max_patch_bytes = DEFAULT_MAX_PATCH_BYTES
    env_limit = _positive_int(env_mapping.get(MAX_PATCH_BYTES_ENV))
    if env_limit is not None:
        max_patch_bytes = env_limit

    default_format = PatchFormat.BLOCK
    patching_cfg = config.get("patching")
    if isinstance(patching_cfg, Mapping):
        configured_limit = _positive_int(patching_cfg.get("max_patch_bytes"))
        if configured_limit is not None:
            max_patch_bytes = configured_limit
        format_value = patching_cfg.get("default_format")
        if isinstance(format_value, str) and format_value.strip():
            default_format = coerce_format(format_value)

    return PatchSettings(
        root=resolve_repo_root(config, config_path),
        default_format=default_format,
        max_patch_bytes=max_patch_bytes,
    )


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_CONFIG_TEMPLATE",
    "MAX_PATCH_BYTES_ENV",
    "PatchSettings",
    "load_settings",
    "resolve_repo_root",
]
