"""Thorfix: applies model-authored patches to a repository working copy."""

from .patching import PatchFormat, PatchOutcome, apply_patch, create_patch
from .tools import ToolResult, ToolRouter

__all__ = ["PatchFormat", "PatchOutcome", "ToolResult", "ToolRouter", "apply_patch", "create_patch"]
