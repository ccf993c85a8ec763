"""
Fakepoint Server

FastAPI application serving fake endpoints next to the management API.

Features:
- Exact (path, method) interception of configured endpoints
- Management API for creating, editing, toggling and deleting endpoints
- Health check
- Optional seed file loaded at startup
- JSON error bodies for every failure
"""

from __future__ import annotations  # Enable forward references for type hints

import logging
import os
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from ..registry import EndpointRegistry, format_timestamp, utc_now
from ..common import EndpointLoader
from .errors import FakepointError
from .interceptor import EndpointInterceptor, request_path
from .management import EndpointManager, create_management_router


ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]
LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


@dataclass
class ServerConfig:
    """Configuration for the Fakepoint server."""

    # Server options
    host: str = "127.0.0.1"
    port: int = 3001
    log_level: str = "info"

    # Routing
    management_prefix: str = "/api/management"
    health_path: str = "/api/health"
    cors_enabled: bool = True

    # Endpoints to preload at startup (YAML or JSON)
    seed_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> 'ServerConfig':
        """
        Build a config from environment variables.

        Reads PORT, FAKEPOINT_HOST, FAKEPOINT_LOG_LEVEL and FAKEPOINT_SEED_FILE.
        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        config = cls()

        if env.get('PORT'):
            try:
                config.port = int(env['PORT'])
            except ValueError:
                raise ValueError(f"Invalid PORT value: {env['PORT']}")
        if env.get('FAKEPOINT_HOST'):
            config.host = env['FAKEPOINT_HOST']
        if env.get('FAKEPOINT_LOG_LEVEL'):
            level = env['FAKEPOINT_LOG_LEVEL'].lower()
            if level not in LOG_LEVELS:
                raise ValueError(
                    f"Invalid FAKEPOINT_LOG_LEVEL value: {env['FAKEPOINT_LOG_LEVEL']}. "
                    f"Must be one of {', '.join(LOG_LEVELS)}"
                )
            config.log_level = level
        if env.get('FAKEPOINT_SEED_FILE'):
            config.seed_file = env['FAKEPOINT_SEED_FILE']

        return config


class FakepointServer:
    """
    Composition root owning the endpoint registry and the FastAPI app.

    The registry is created here (or passed in) and handed to both the
    interceptor and the management API, so there is no module-level state.

    Example:
        server = FakepointServer()
        server.start()

        # With a seed file on another port
        config = ServerConfig(port=4000, seed_file='endpoints.yaml')
        FakepointServer(config=config).start()
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        registry: Optional[EndpointRegistry] = None
    ):
        """
        Initialize the server.

        Args:
            config: Optional ServerConfig
            registry: Optional EndpointRegistry (a new empty one if None)
        """
        self.config = config or ServerConfig()

        self.logger = logging.getLogger("fakepoint")
        self.logger.setLevel(getattr(logging, self.config.log_level.upper()))

        self.registry = registry if registry is not None else EndpointRegistry()
        self.manager = EndpointManager(self.registry)

        if self.config.seed_file:
            self.load_seed_file(self.config.seed_file)

        self.app = self._create_app()

    def load_seed_file(self, seed_file: str) -> int:
        """
        Create every endpoint listed in a seed file.

        Entries go through the same validation and conflict rules as the
        management API.

        Returns:
            Number of endpoints created
        """
        entries = EndpointLoader(seed_file).load()
        for entry in entries:
            self.manager.create(entry, allow_enabled=True)
        self.logger.info(f"Loaded {len(entries)} endpoints from {seed_file}")
        return len(entries)

    def _create_app(self) -> FastAPI:
        """Create FastAPI application with routes, middleware and handlers."""
        app = FastAPI(
            title="Fakepoint",
            description="Fake HTTP endpoints with a management API",
            version="1.0.0",
            # Every path outside the management prefix belongs to fake endpoints
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )

        # Starlette runs the last added middleware first: CORS wraps the interceptor
        app.add_middleware(
            EndpointInterceptor,
            registry=self.registry,
            management_prefix=self.config.management_prefix
        )
        if self.config.cors_enabled:
            app.add_middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["*"],
                allow_headers=["*"]
            )

        @app.exception_handler(FakepointError)
        async def handle_fakepoint_error(request: Request, exc: FakepointError):
            return JSONResponse(content=exc.to_dict(), status_code=exc.status_code)

        @app.exception_handler(Exception)
        async def handle_unexpected_error(request: Request, exc: Exception):
            self.logger.exception(f"Server error on {request.method} {request.url.path}")
            return JSONResponse(content={'error': 'Internal server error'}, status_code=500)

        app.include_router(
            create_management_router(self.manager),
            prefix=self.config.management_prefix.rstrip('/')
        )

        @app.get(self.config.health_path)
        async def health():
            """Health check."""
            return JSONResponse(content={
                'status': 'ok',
                'timestamp': format_timestamp(utc_now())
            })

        # Catch-all for requests no fake endpoint or route claimed
        @app.api_route("/{path:path}", methods=ALL_METHODS)
        async def not_found(request: Request, path: str):
            target = request_path(request)
            if request.url.query:
                target = f"{target}?{request.url.query}"
            return JSONResponse(
                content={
                    'error': 'Endpoint not found',
                    'message': f"No fake endpoint configured for {request.method} {target}"
                },
                status_code=404
            )

        return app

    def start(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        access_log: bool = True
    ):
        """
        Start the server (blocking).

        Args:
            host: Host to bind to (overrides config)
            port: Port to bind to (overrides config)
            access_log: Enable access logging
        """
        actual_host = host or self.config.host
        actual_port = port or self.config.port

        print(f"🚀 Fakepoint server running on http://{actual_host}:{actual_port}")
        print(f"📋 Management API available at http://{actual_host}:{actual_port}{self.config.management_prefix}")
        print(f"   Endpoints loaded: {len(self.registry)}")
        print()

        uvicorn.run(
            self.app,
            host=actual_host,
            port=actual_port,
            log_level=self.config.log_level,
            access_log=access_log
        )

    def get_app(self) -> FastAPI:
        """
        Get the FastAPI app instance for testing or custom deployment.

        Returns:
            FastAPI application instance
        """
        return self.app


def create_server(
    host: str = "127.0.0.1",
    port: int = 3001,
    management_prefix: str = "/api/management",
    seed_file: Optional[str] = None,
    cors_enabled: bool = True,
    log_level: str = "info"
) -> FakepointServer:
    """
    Convenience function to create and configure a server.

    Args:
        host: Host to bind to
        port: Port to bind to
        management_prefix: Base path of the management API
        seed_file: Optional YAML/JSON file of endpoints to preload
        cors_enabled: Allow cross-origin requests from any origin
        log_level: Logging level name

    Returns:
        Configured FakepointServer instance
    """
    config = ServerConfig(
        host=host,
        port=port,
        management_prefix=management_prefix,
        seed_file=seed_file,
        cors_enabled=cors_enabled,
        log_level=log_level
    )

    return FakepointServer(config=config)
