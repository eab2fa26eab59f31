"""
jdecomp_mcp server

This module initializes the FastMCP server, registers the decompile tools and
session resources, and runs it over stdio or HTTP.
"""

import shutil
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from jdecomp_mcp import __version__, resources
from jdecomp_mcp.core.config import get_config
from jdecomp_mcp.core.hooks import auto_decompile_hook
from jdecomp_mcp.core.logging_config import get_logger, setup_logging
from jdecomp_mcp.core.settings_manager import get_settings
from jdecomp_mcp.tools.decompile_tools import decompiler_status, register_decompile_tools

setup_logging()
logger = get_logger(__name__)


def _external_tools() -> dict[str, str]:
    config = get_config()
    return {
        "java": config.java_command,
        "content_probe": config.file_command[0],
        "extractor": config.extract_command[0],
    }


def dependency_report() -> dict[str, dict]:
    """Locate the external programs the decompile path shells out to."""
    report = {}
    for role, command in _external_tools().items():
        located = shutil.which(command)
        report[role] = (
            {"status": "available", "path": located}
            if located
            else {"status": "unavailable", "command": command}
        )
    return report


@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncGenerator[None, None]:
    """Check external tools and apply the initial auto-decompile setting."""
    logger.info("jdecomp MCP server starting...")

    for role, status in dependency_report().items():
        if status["status"] == "available":
            logger.info(f"{role} found: {status['path']}")
        else:
            logger.warning(f"{role} not found ({status['command']}); decompilation may fail")

    settings = get_settings()
    auto_decompile_hook.enabled = settings.auto_decompile
    logger.info(
        f"Selected decompiler: {settings.decompiler} "
        f"(auto-decompile {'on' if settings.auto_decompile else 'off'})"
    )

    yield

    logger.info("jdecomp MCP server shutting down")


mcp = FastMCP(name="jdecomp_mcp", lifespan=server_lifespan)

register_decompile_tools(mcp)
resources.register_resources(mcp)


def main():
    """Run the MCP server."""
    settings = get_config()
    transport = settings.mcp_transport.lower()

    if transport == "http":
        import uvicorn
        from fastapi import FastAPI
        from fastapi.responses import JSONResponse

        from jdecomp_mcp.core.metrics import metrics_collector

        mcp_app = mcp.http_app()
        app = FastAPI(title="jdecomp_mcp", lifespan=mcp_app.lifespan)
        app.mount("/mcp", mcp_app)

        @app.get("/health")
        async def health():
            """Health check with the status of java and the helper tools."""
            deps = dependency_report()
            java_ok = deps["java"]["status"] == "available"
            return JSONResponse(
                content={
                    "status": "healthy" if java_ok else "degraded",
                    "service": "jdecomp_mcp",
                    "version": __version__,
                    "timestamp": time.time(),
                    "dependencies": deps,
                }
            )

        @app.get("/status")
        async def status():
            """Decompiler configuration and availability."""
            return JSONResponse(content=decompiler_status().model_dump())

        @app.get("/metrics")
        async def metrics():
            """Metrics endpoint returning collected tool metrics."""
            return JSONResponse(content=metrics_collector.get_metrics())

        uvicorn.run(app, host="0.0.0.0", port=8000)
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
