"""Dispatch table mapping agent tool names to their argument models and handlers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.type_adapter import TypeAdapter

from ..config import PatchSettings
from . import filesystem
from .result import ToolResult

LOGGER = logging.getLogger(__name__)


class ToolArguments(BaseModel):
    """Base model for tool arguments; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


class ReadFileArguments(ToolArguments):
    path: str = Field(description="Path to the file, relative to the repository root.")


class ListFilesArguments(ToolArguments):
    pass


class WriteFileArguments(ToolArguments):
    path: str = Field(description="Path to the file, relative to the repository root.")
    content: str = Field(description="Complete new file content.")


class ModifyFileArguments(ToolArguments):
    path: str = Field(description="Path to the file, relative to the repository root.")
    diff: str = Field(
        description=(
            "One or more blocks of the form '<<<<<<< SEARCH', exact original text, '=======', "
            "exact replacement text, '>>>>>>> REPLACE'. Only the first match of each block is replaced."
        )
    )


class PatchFileArguments(ToolArguments):
    path: str = Field(description="Path to the file, relative to the repository root.")
    patch: str = Field(
        description=(
            "Unified diff hunks: '@@ -<start>,<len> +<start>,<len> @@' headers followed by lines "
            "prefixed with ' ' (context), '-' (removed) or '+' (added)."
        )
    )


ToolRunner = Callable[[PatchSettings, Any], ToolResult]


@dataclass(slots=True)
class ToolEntry:
    """Metadata describing how to execute a single tool."""

    description: str
    arguments_model: type[ToolArguments]
    runner: ToolRunner


def _run_read_file(settings: PatchSettings, arguments: ReadFileArguments) -> ToolResult:
    return filesystem.read_file(settings.root, arguments.path)


def _run_list_files(settings: PatchSettings, arguments: ListFilesArguments) -> ToolResult:
    return filesystem.list_files(settings.root)


def _run_write_file(settings: PatchSettings, arguments: WriteFileArguments) -> ToolResult:
    return filesystem.write_file(settings.root, arguments.path, arguments.content)


def _run_modify_file(settings: PatchSettings, arguments: ModifyFileArguments) -> ToolResult:
    return filesystem.modify_file(
        settings.root,
        arguments.path,
        arguments.diff,
        max_patch_bytes=settings.max_patch_bytes,
    )


def _run_patch_file(settings: PatchSettings, arguments: PatchFileArguments) -> ToolResult:
    return filesystem.patch_file_tool(
        settings.root,
        arguments.path,
        arguments.patch,
        max_patch_bytes=settings.max_patch_bytes,
    )


class ToolRouter:
    """Validate raw tool-call arguments and run the matching file tool."""

    def __init__(self, settings: PatchSettings | None = None, *, root: Path | str | None = None) -> None:
        if settings is None:
            if root is None:
                raise ValueError("ToolRouter requires settings or a root directory.")
            settings = PatchSettings(root=Path(root).resolve())
        self._settings = settings
        self._registry: Dict[str, ToolEntry] = {
            "read_file": ToolEntry("Reads a file from the repository.", ReadFileArguments, _run_read_file),
            "list_files": ToolEntry("Lists all files in the repository.", ListFilesArguments, _run_list_files),
            "write_file": ToolEntry("Creates or overwrites a file in the repository.", WriteFileArguments, _run_write_file),
            "modify_file": ToolEntry(
                "Applies SEARCH/REPLACE blocks to a file in the repository.",
                ModifyFileArguments,
                _run_modify_file,
            ),
            "patch_file": ToolEntry(
                "Applies unified diff hunks to a file in the repository.",
                PatchFileArguments,
                _run_patch_file,
            ),
        }

    @property
    def settings(self) -> PatchSettings:
        return self._settings

    def available_tools(self) -> Iterable[str]:
        """Return the tool names currently registered with the router."""
        return self._registry.keys()

    def describe(self) -> list[dict[str, Any]]:
        """Render tool definitions with JSON-schema inputs for the LLM request."""
        definitions: list[dict[str, Any]] = []
        for name, entry in self._registry.items():
            definitions.append(
                {
                    "name": name,
                    "description": entry.description,
                    "input_schema": entry.arguments_model.model_json_schema(),
                }
            )
        return definitions

    def invoke(self, name: str, arguments: Mapping[str, Any] | str | None = None) -> ToolResult:
        """Run tool ``name``; every failure comes back as an error result."""
        entry = self._registry.get(name)
        if entry is None:
            valid = ", ".join(sorted(self._registry))
            return ToolResult.error(f"Unknown tool '{name}'. Expected one of: {valid}")

        try:
            payload = self._coerce_arguments(arguments, entry.arguments_model)
        except ValueError as error:
            return ToolResult.error(str(error))

        try:
            return entry.runner(self._settings, payload)
        except OSError as error:
            LOGGER.warning("Tool %s failed: %s", name, error)
            return ToolResult.error(f"Tool {name} failed: {error}")

    @staticmethod
    def _coerce_arguments(arguments: Mapping[str, Any] | str | None, model: type[ToolArguments]) -> ToolArguments:
        """Validate ``arguments`` (a mapping or JSON text) into ``model``."""
        if arguments is None:
            arguments = {}
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments) if arguments.strip() else {}
            except json.JSONDecodeError as error:
                raise ValueError(f"Tool arguments are not valid JSON: {error}") from error

        adapter = TypeAdapter(model)
        try:
            return adapter.validate_python(arguments)
        except ValidationError as error:
            raise ValueError(f"Arguments for {model.__name__} did not validate: {error}") from error


__all__ = [
    "ListFilesArguments",
    "ModifyFileArguments",
    "PatchFileArguments",
    "ReadFileArguments",
    "ToolArguments",
    "ToolEntry",
    "ToolRouter",
    "WriteFileArguments",
]
