"""Model endpoint gateway.

Sends a prompt to an Ollama-style ``/api/generate`` endpoint and returns the
complete response text. Failures never escape as exceptions: every call
returns ``(text, None)`` or ``(None, GatewayError)``.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional, Tuple

import httpx

from app.core.exceptions import GatewayError, GatewayErrorKind
from app.schemas.connection import AIConfig, ConnectionTestResult

logger = logging.getLogger("pipeline")


class ModelGateway:
    """Non-streaming client for the generative model endpoint."""

    def __init__(
        self,
        config: AIConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.transport = transport

    @property
    def base_url(self) -> str:
        endpoint = self.config.endpoint.rstrip("/")
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"http://{endpoint}"

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=self.transport,
        )

    async def invoke(
        self, prompt: str, timeout: Optional[float] = None
    ) -> Tuple[Optional[str], Optional[GatewayError]]:
        """
        Send a prompt and wait for the whole response body.

        Args:
            prompt: Prompt text
            timeout: Seconds before the call resolves as unreachable;
                defaults to the configured timeout

        Returns:
            Tuple of (response text, error); exactly one is set
        """
        timeout = timeout if timeout is not None else self.config.timeout_seconds
        payload = {"model": self.config.model, "prompt": prompt, "stream": False}

        try:
            response = await asyncio.wait_for(self._post(payload, timeout), timeout)
        except asyncio.TimeoutError as e:
            return None, self._fail(
                GatewayErrorKind.UNREACHABLE,
                f"Model endpoint did not answer within {timeout}s",
                e,
            )
        except (httpx.RequestError, httpx.InvalidURL) as e:
            # DNS failures, refused connections and httpx's own timeouts
            return None, self._fail(
                GatewayErrorKind.UNREACHABLE,
                f"Model endpoint unreachable: {e}",
                e,
            )

        if not response.is_success:
            return None, self._fail(
                GatewayErrorKind.NON_SUCCESS_STATUS,
                f"Model endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            return None, self._fail(
                GatewayErrorKind.EMPTY_BODY, "Model endpoint returned a non-JSON body", e
            )

        text = body.get("response") if isinstance(body, dict) else None
        if not isinstance(text, str) or not text.strip():
            return None, self._fail(
                GatewayErrorKind.EMPTY_BODY, "Model endpoint returned no response text"
            )

        logger.debug(f"Model returned {len(text)} characters")
        return text, None

    async def _post(self, payload: dict, timeout: float) -> httpx.Response:
        async with self._client(timeout) as client:
            return await client.post("/api/generate", json=payload)

    async def test_connection(self) -> ConnectionTestResult:
        """Check the endpoint is reachable and list the models it serves."""
        try:
            async with self._client(self.config.timeout_seconds) as client:
                response = await client.get("/api/tags")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"AI connection test failed: {e}")
            return ConnectionTestResult(
                success=False, message=f"AI model connection failed: {e}"
            )

        if not response.is_success:
            return ConnectionTestResult(
                success=False,
                message=f"AI model connection failed: HTTP {response.status_code}",
            )

        try:
            models = [m.get("name") for m in response.json().get("models", [])]
        except (ValueError, AttributeError):
            models = []

        return ConnectionTestResult(
            success=True,
            message="AI model connection successful",
            details={
                "endpoint": self.config.endpoint,
                "model": self.config.model,
                "model_available": self.config.model in models,
                "connected_at": datetime.utcnow().isoformat(),
            },
        )

    def _fail(
        self,
        kind: GatewayErrorKind,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ) -> GatewayError:
        logger.warning(f"Gateway failure ({kind.value}): {message}")
        return GatewayError(kind, message, cause=cause, status_code=status_code)
