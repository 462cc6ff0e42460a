"""HTTP client and background poller for the dashboard API."""

import atexit
import logging
import threading
from typing import Any, Callable, Optional

import httpx

from .errors import DashboardError, QueryValidationError, UpstreamError
from .query import DashboardQuery, parse_query

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 30.0


class DashboardClient:
    """
    Thin synchronous client for the dashboard API.

    Query parameters are validated locally before any request is sent.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._http = httpx.Client(
            base_url=self.endpoint,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def fetch(self, query: Any = None) -> dict:
        """GET /api/dashboard for a preset range or a from/to pair."""
        return self._get("/api/dashboard", parse_query(query))

    def activity(self) -> dict:
        return self._get("/api/dashboard/activity")

    def trends(self, query: Any = None) -> dict:
        return self._get("/api/dashboard/trends", parse_query(query))

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str, query: Optional[DashboardQuery] = None) -> dict:
        params = query.to_params() if query is not None else {}
        try:
            response = self._http.get(path, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Request to {self.endpoint}{path} failed: {e}", cause=e) from e

        if response.status_code == 400:
            body = self._json(response, path)
            raise QueryValidationError(
                body.get("details", []), body.get("error", "Invalid query parameters")
            )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Dashboard API returned {response.status_code} for {path}", cause=e
            ) from e
        return self._json(response, path)

    def _json(self, response: httpx.Response, path: str) -> dict:
        # Proxies and login pages answer with HTML
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError(
                f"Dashboard API returned a non-JSON body ({response.status_code}) for {path}", cause=e
            ) from e
        if not isinstance(body, dict):
            raise UpstreamError(f"Dashboard API returned a non-object body for {path}")
        return body


class DashboardPoller:
    """
    Re-fetches the dashboard on a fixed interval from a background thread.

    At most one request is outstanding at a time. Changing the query bumps a
    generation counter, and a response that comes back for an older
    generation is dropped instead of published.
    """

    def __init__(
        self,
        client: DashboardClient,
        interval: float = DEFAULT_POLL_INTERVAL,
        query: Any = None,
        on_data: Optional[Callable[[dict], None]] = None,
        on_error: Optional[Callable[[DashboardError], None]] = None,
    ):
        self.client = client
        self.interval = interval
        self.on_data = on_data
        self.on_error = on_error
        self.latest: Optional[dict] = None

        self._query = parse_query(query)
        self._generation = 0
        self._lock = threading.Lock()
        self._in_flight = threading.Lock()
        self._wake = threading.Event()
        self._shutdown = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._started = False

    @property
    def query(self) -> DashboardQuery:
        with self._lock:
            return self._query

    def start(self) -> None:
        """Start the background polling thread."""
        if self._started:
            return

        self._shutdown.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        self._started = True

        atexit.register(self.shutdown)

    def shutdown(self) -> None:
        """Stop polling and wait briefly for the thread to exit."""
        if not self._started:
            return

        self._shutdown.set()
        self._wake.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=2.0)
        self._started = False

    def set_query(self, query: Any) -> None:
        """Switch to a new query and poll for it right away."""
        parsed = parse_query(query)
        with self._lock:
            self._query = parsed
            self._generation += 1
            self.latest = None
        self._wake.set()

    def refresh(self) -> None:
        """Ask the background thread to poll now instead of at the next tick."""
        self._wake.set()

    def poll_once(self) -> Optional[dict]:
        """
        Fetch once for the current query.

        Returns the published data, or None if another poll was already in
        flight, the request failed, or the query changed meanwhile.
        """
        if not self._in_flight.acquire(blocking=False):
            return None
        try:
            with self._lock:
                query, generation = self._query, self._generation

            try:
                data = self.client.fetch(query)
            except DashboardError as e:
                if self.on_error:
                    self.on_error(e)
                else:
                    logger.warning("Dashboard poll failed: %s", e)
                return None

            with self._lock:
                if generation != self._generation:
                    logger.debug("Dropping dashboard result for replaced query %s", query.to_params())
                    return None
                self.latest = data

            if self.on_data:
                self.on_data(data)
            return data
        finally:
            self._in_flight.release()

    def _run(self) -> None:
        while not self._shutdown.is_set():
            try:
                self.poll_once()
            except Exception:
                # Keep polling; a failing callback must not stop the thread
                logger.exception("Dashboard poll raised")
            self._wake.wait(self.interval)
            self._wake.clear()
