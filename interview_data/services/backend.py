"""Lifecycle of the shared Supabase client handle."""

from typing import Any, Awaitable, Callable, Optional

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from .configuration_manager import BackendConfig
from ..utils.exceptions import BackendConnectionError, BackendNotConnectedError
from ..utils.logging import get_logger

ClientFactory = Callable[..., Awaitable[Any]]


class BackendConnection:
    """Owns the one backend client handle a process shares.

    The handle is created by :meth:`connect`, reused by every
    ``InterviewDataClient`` built on top of it and released by :meth:`close`.
    The underlying HTTP session pools connections, so concurrent calls through
    the same handle are fine.
    """

    def __init__(self, config: BackendConfig, client_factory: ClientFactory = acreate_client):
        """Initialize the connection holder.

        Args:
            config: Backend connection settings.
            client_factory: Coroutine creating the client; defaults to
                ``supabase.acreate_client``.
        """
        self.config = config
        self._client_factory = client_factory
        self._client: Optional[AsyncClient] = None
        self.logger = get_logger(__name__)

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> AsyncClient:
        """The live client handle.

        Raises:
            BackendNotConnectedError: If connect() has not been awaited or the
                connection was closed.
        """
        if self._client is None:
            raise BackendNotConnectedError()
        return self._client

    async def connect(self) -> AsyncClient:
        """Create the client handle, or return the existing one.

        Raises:
            BackendConnectionError: If the client cannot be created.
        """
        if self._client is not None:
            return self._client

        options = AsyncClientOptions(
            schema=self.config.schema,
            postgrest_client_timeout=self.config.timeout,
        )
        try:
            self._client = await self._client_factory(self.config.url, self.config.key, options=options)
        except Exception as e:
            self.logger.error(f"Failed to connect to backend at {self.config.url}: {str(e)}")
            raise BackendConnectionError(
                f"Backend connection failed: {str(e)}", url=self.config.url
            ) from e

        self.logger.info(f"Connected to backend at {self.config.url}")
        return self._client

    async def close(self) -> None:
        """Release the PostgREST and auth HTTP sessions. Safe to call more than once.

        A session that fails to close is logged and skipped; the other one is
        still closed.
        """
        if self._client is None:
            return

        client, self._client = self._client, None
        clean = True
        for name, closer in (("postgrest", client.postgrest.aclose), ("auth", client.auth.close)):
            try:
                await closer()
            except Exception as e:
                clean = False
                self.logger.warning(f"Failed to close backend {name} session cleanly: {str(e)}")

        if clean:
            self.logger.info("Backend connection closed")

    async def __aenter__(self) -> AsyncClient:
        return await self.connect()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
