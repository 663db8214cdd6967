"""
CompareAnything — HTTP Client

Async client for the four endpoints, and the form wiring on top of it:
`load` fills recent/trending once, `submit` sends one compare request and
stores the outcome on the FormState.
"""

import asyncio
from typing import Optional

import httpx

from compare_anything.config import log
from compare_anything.form import FormState


class CompareClientError(Exception):
    """Non-2xx response or transport failure. `message` is safe to show to a user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return "Unexpected error"
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return "Unexpected error"


class CompareClient:
    """
    Thin wrapper around httpx.AsyncClient.

    Pass `http` to reuse an existing client (tests pass one bound to the ASGI app);
    otherwise one is created for `base_url` and closed by `aclose()`.
    """

    def __init__(self, base_url: str = "http://localhost:8000", http: Optional[httpx.AsyncClient] = None,
                 timeout: float = 90.0):
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "CompareClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.RequestError as e:
            log("ERROR", "api request failed", method=method, path=path, error=str(e))
            raise CompareClientError("Something went wrong.") from e
        if response.is_error:
            raise CompareClientError(_error_message(response), status_code=response.status_code)
        return response

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def compare(self, payload: dict) -> dict:
        """POST /api/compare → {"result": ..., "id": ...}"""
        response = await self._request("POST", "/api/compare", json=payload)
        return response.json()

    async def recent(self) -> list[dict]:
        response = await self._request("GET", "/api/recent")
        return response.json()

    async def trending(self) -> list[dict]:
        response = await self._request("GET", "/api/trending")
        return response.json()

    async def comparison(self, comparison_id: str) -> dict:
        """
        GET /api/comparisons/{id}. Invalid and not-found states are returned, not raised.
        """
        try:
            response = await self._http.get(f"/api/comparisons/{comparison_id}")
        except httpx.RequestError as e:
            raise CompareClientError("Something went wrong.") from e
        if response.status_code in (200, 400, 404):
            return response.json()
        raise CompareClientError(_error_message(response), status_code=response.status_code)

    # -------------------------------------------------------------------------
    # Form wiring
    # -------------------------------------------------------------------------

    async def load(self, form: FormState) -> None:
        """Fetch recent and trending once. A failing list stays empty; the form stays usable."""
        recent, trending = await asyncio.gather(self.recent(), self.trending(), return_exceptions=True)
        if isinstance(recent, CompareClientError):
            log("WARN", "recent comparisons unavailable", error=recent.message)
        elif isinstance(recent, BaseException):
            raise recent
        else:
            form.recent = recent
        if isinstance(trending, CompareClientError):
            log("WARN", "trending comparisons unavailable", error=trending.message)
        elif isinstance(trending, BaseException):
            raise trending
        else:
            form.trending = trending

    async def submit(self, form: FormState) -> bool:
        """
        Send one compare request for the form's current inputs.

        Returns True on success. On failure `form.error` holds the message to show.
        """
        form.result = None
        form.comparison_id = None
        payload = form.build_request()
        if payload is None:
            return False

        form.loading = True
        try:
            data = await self.compare(payload)
        except CompareClientError as e:
            form.error = e.message or "Something went wrong."
            return False
        finally:
            form.loading = False

        form.result = data.get("result")
        form.comparison_id = data.get("id")
        return True
