"""
Tool definitions for jdecomp_mcp.

This package contains the MCP tool wrappers around the decompile pipeline.
"""

from jdecomp_mcp.tools import decompile_tools

__all__ = ["decompile_tools"]
