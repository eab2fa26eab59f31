"""
jdecomp_mcp - MCP server for viewing decompiled Java class files

This package shells out to an external Java decompiler (CFR or Fernflower)
to turn .class files, on disk or inside JAR archives, into read-only Java
source sessions that AI agents and editors can read through MCP.
"""

__version__ = "0.1.0"
