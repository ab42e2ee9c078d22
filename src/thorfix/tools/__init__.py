"""Tool integrations exposed to the calling agent."""

from .filesystem import list_files, modify_file, patch_file_tool, read_file, write_file
from .result import ToolResult
from .router import ToolEntry, ToolRouter

__all__ = [
    "ToolEntry",
    "ToolResult",
    "ToolRouter",
    "list_files",
    "modify_file",
    "patch_file_tool",
    "read_file",
    "write_file",
]
