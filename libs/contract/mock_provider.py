"""Stand-in HTTP server for consumer-side contract tests.

``MockProvider`` serves only the canned responses of the interactions
registered with it. A request matching a registered interaction (method and
path, plus query when declared) gets that interaction's response, replayed
byte for byte as often as it is asked for. Anything else is answered with a
500 contract-violation body and remembered, so the surrounding verification
fails.

The server is a small FastAPI app run by uvicorn on a daemon thread bound to
an OS-assigned port. Handlers run on that thread while assertions run on the
test thread, hence the lock around registered and observed state.

Typical usage
>>> with MockProvider("Inventory", "System") as provider:
...     with provider.verifying(server_name_interaction):
...         body = InventoryClient(provider.uri).get_server_name()
"""

import socket
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Set

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
import structlog

from libs.common.config import ContractConfig
from .errors import MockServerError, PactVerificationError
from .models import Interaction, Mismatch, MismatchKind, Pact

logger = structlog.get_logger("contract.mock_provider")

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def find_free_port(host: str = "127.0.0.1") -> int:
    """Ask the OS for a free TCP port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind((host, 0))
        return s.getsockname()[1]


class MockProvider:
    """Ephemeral provider stand-in serving registered interactions.

    Parameters
    - consumer / provider: Participant names written into the pact file
    - host: Interface to bind (loopback by default)
    - pact_dir: Where ``write_pact`` puts the pact file; ``None`` disables it
    - startup_timeout: Seconds to wait for uvicorn to accept connections
    """

    def __init__(
        self,
        consumer: str,
        provider: str,
        host: str = "127.0.0.1",
        pact_dir: Optional[str] = None,
        startup_timeout: float = 10.0,
    ):
        self.consumer = consumer
        self.provider = provider
        self.host = host
        self.pact_dir = pact_dir
        self.startup_timeout = startup_timeout
        self.port: Optional[int] = None

        self._lock = threading.Lock()
        self._registered: List[Interaction] = []
        self._consumed: Set[int] = set()  # indexes into _registered
        self._unexpected: List[Mismatch] = []
        self._pact = Pact(consumer, provider)

        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None
        self.app = self._create_app()

    @classmethod
    def from_config(cls, config: ContractConfig) -> "MockProvider":
        return cls(
            consumer=config.sp_pact_consumer,
            provider=config.sp_pact_provider,
            host=config.sp_mock_host,
            pact_dir=config.sp_pact_dir,
            startup_timeout=config.sp_mock_startup_timeout,
        )

    @property
    def uri(self) -> str:
        if self.port is None:
            raise MockServerError("Mock provider is not running")
        return f"http://{self.host}:{self.port}"

    @property
    def pact(self) -> Pact:
        """Interactions verified so far."""
        return self._pact

    def _create_app(self) -> FastAPI:
        app = FastAPI(title=f"{self.provider} mock provider", docs_url=None, redoc_url=None, openapi_url=None)

        @app.api_route("/{path:path}", methods=_ALL_METHODS)
        async def handle(request: Request) -> Response:
            query = request.url.query or None
            interaction = self._match(request.method, request.url.path, query)
            if interaction is None:
                return JSONResponse(
                    status_code=500,
                    content={
                        "error": "Unexpected request",
                        "method": request.method,
                        "path": request.url.path,
                    },
                )
            return Response(
                content=interaction.render_body(),
                status_code=interaction.response_status,
                headers=interaction.render_headers(),
            )

        return app

    def _match(self, method: str, path: str, query: Optional[str]) -> Optional[Interaction]:
        with self._lock:
            for index, interaction in enumerate(self._registered):
                if interaction.matches_request(method, path, query):
                    self._consumed.add(index)
                    logger.debug("Request matched", description=interaction.description, path=path)
                    return interaction

            target = f"{path}?{query}" if query else path
            self._unexpected.append(Mismatch(
                MismatchKind.REQUEST,
                f"Unexpected request {method} {target}",
                path=target,
                actual=method,
            ))
            logger.warning("Unexpected request", method=method, path=path, query=query)
            return None

    def start(self) -> "MockProvider":
        """Start serving on a fresh port and wait until it accepts connections."""
        if self._thread is not None:
            raise MockServerError("Mock provider already started")

        self.port = find_free_port(self.host)
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False,
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run,
            daemon=True,
            name=f"mock-provider-{self.port}",
        )
        self._thread.start()

        deadline = time.monotonic() + self.startup_timeout
        while not self._server.started:
            if not self._thread.is_alive() or time.monotonic() > deadline:
                self.stop()
                raise MockServerError(f"Mock provider failed to start on {self.host}:{self.port}")
            time.sleep(0.01)

        logger.info("Mock provider started", provider=self.provider, uri=self.uri)
        return self

    def stop(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=self.startup_timeout)
            if self._thread.is_alive():
                logger.warning("Mock provider thread did not exit", port=self.port)
        self._server = None
        self._thread = None
        self.port = None

    def __enter__(self) -> "MockProvider":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def register(self, *interactions: Interaction) -> None:
        with self._lock:
            for interaction in interactions:
                self._registered.append(interaction)
                logger.debug(
                    "Interaction registered",
                    description=interaction.description,
                    provider_state=interaction.provider_state,
                )

    def reset(self) -> None:
        with self._lock:
            self._registered = []
            self._consumed = set()
            self._unexpected = []

    def verify(self) -> List[Interaction]:
        """Check observed traffic and clear registrations.

        Every registered interaction must have been requested at least once
        and no unexpected request may have arrived. Verified interactions are
        added to ``pact``.

        Raises
        - PactVerificationError listing unexpected and missing requests
        """
        with self._lock:
            mismatches = list(self._unexpected)
            for index, interaction in enumerate(self._registered):
                if index not in self._consumed:
                    mismatches.append(Mismatch(
                        MismatchKind.MISSING,
                        f"Expected request {interaction.request_method} {interaction.request_path} was not received",
                        path=interaction.request_path,
                        expected=interaction.description,
                    ))
            verified = list(self._registered)

        self.reset()
        if mismatches:
            raise PactVerificationError(
                f"Contract violated for provider {self.provider}",
                mismatches,
            )

        for interaction in verified:
            self._pact = self._pact.with_interaction(interaction)
        return verified

    @contextmanager
    def verifying(self, *interactions: Interaction) -> Iterator["MockProvider"]:
        """Register ``interactions`` for the block and verify on exit.

        If the block raises, registrations are discarded and the error
        propagates untouched.
        """
        self.register(*interactions)
        try:
            yield self
        except Exception:
            self.reset()
            raise
        self.verify()

    def write_pact(self) -> Optional[Path]:
        if self.pact_dir is None or not self._pact.interactions:
            return None
        return self._pact.write(self.pact_dir)
