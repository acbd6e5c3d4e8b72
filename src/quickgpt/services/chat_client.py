"""Chat-completion client with connectivity probe and transport retries."""

import asyncio
import errno
from typing import Any, Dict

import httpx
from pydantic import HttpUrl, TypeAdapter, ValidationError

from quickgpt.models.chat_response import ChatCompletionResponse
from quickgpt.models.config import ChatRequestConfig
from quickgpt.models.outcome import ChatOutcome, TransportErrorKind
from quickgpt.utils.logging import get_logger


logger = get_logger(__name__)

_http_url = TypeAdapter(HttpUrl)


def is_valid_endpoint(endpoint: str) -> bool:
    """
    Check that an endpoint is an absolute http(s) URL with a host.

    Args:
        endpoint: Endpoint string from configuration

    Returns:
        True if the endpoint can be used for a request
    """
    if not endpoint or endpoint != endpoint.strip():
        return False
    try:
        url = _http_url.validate_python(endpoint)
    except ValidationError:
        return False
    return bool(url.host)


def classify_transport_error(error: Exception) -> TransportErrorKind:
    """
    Map an httpx transport exception to a user-facing failure class.

    Args:
        error: Exception raised while sending the request

    Returns:
        TransportErrorKind for the outcome message
    """
    if isinstance(error, httpx.TimeoutException):
        return TransportErrorKind.TIMEOUT

    if isinstance(error, httpx.ConnectError):
        cause = error.__cause__ or error.__context__
        if isinstance(cause, OSError) and cause.errno == errno.ENETUNREACH:
            return TransportErrorKind.NO_CONNECTION
        if "network is unreachable" in str(error).lower():
            return TransportErrorKind.NO_CONNECTION
        # DNS failures and refused connections
        return TransportErrorKind.HOST_UNREACHABLE

    return TransportErrorKind.OTHER


def build_payload(prompt: str, config: ChatRequestConfig) -> Dict[str, Any]:
    """Build the chat-completions request body."""
    return {
        "model": config.model,
        "messages": [
            {"role": "system", "content": config.system_prompt},
            {"role": "user", "content": prompt},
        ],
        "temperature": config.temperature,
    }


class ChatClient:
    """
    Single-shot chat-completion client.

    complete() never raises for network, HTTP or decoding problems: each
    terminal state is returned as a ChatOutcome. Only transport failures are
    retried, with exponential backoff (2s, 4s, ...); HTTP status errors and
    the connectivity probe are not.

    Example:
        >>> client = ChatClient()
        >>> outcome = await client.complete("What is BFS?", config)
        >>> print(outcome.message)
    """

    async def check_connectivity(self, config: ChatRequestConfig) -> bool:
        """
        Probe a well-known host to detect missing connectivity.

        Args:
            config: Request config carrying probe_url and probe_timeout

        Returns:
            True if the probe host answered with HTTP 200; False on any
            httpx error, including an unusable probe_url
        """
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(config.probe_timeout),
                follow_redirects=True,
            ) as client:
                response = await client.get(config.probe_url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(
                "connectivity_probe_failed",
                probe_url=config.probe_url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.status_code != 200:
            logger.warning(
                "connectivity_probe_failed",
                probe_url=config.probe_url,
                status_code=response.status_code,
            )
            return False

        logger.debug("connectivity_probe_ok", probe_url=config.probe_url)
        return True

    async def send_with_retry(
        self,
        payload: Dict[str, Any],
        config: ChatRequestConfig,
    ) -> httpx.Response:
        """
        POST the payload, retrying transport failures with exponential backoff.

        Before retry n (1-based) the client sleeps 2**n seconds.

        Args:
            payload: JSON request body
            config: Request config (endpoint, key, timeout, max_retries)

        Returns:
            The HTTP response, whatever its status

        Raises:
            httpx.TransportError: The last transport error once retries are exhausted
        """
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        }

        attempt = 0

        while True:
            try:
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(config.timeout),
                    verify=config.verify_ssl,
                ) as client:
                    return await client.post(config.endpoint, json=payload, headers=headers)

            except httpx.TransportError as e:
                attempt += 1

                if attempt > config.max_retries:
                    logger.error(
                        "chat_request_failed",
                        attempts=attempt,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    raise

                retry_delay = 2 ** attempt
                logger.warning(
                    "chat_request_retry",
                    attempt=attempt,
                    max_retries=config.max_retries,
                    error=str(e),
                    error_type=type(e).__name__,
                    retry_delay=retry_delay,
                )
                await asyncio.sleep(retry_delay)

    async def complete(self, prompt: str, config: ChatRequestConfig) -> ChatOutcome:
        """
        Send a prompt and return the classified outcome.

        Args:
            prompt: User prompt
            config: Per-call request configuration

        Returns:
            ChatOutcome describing success or the failure class
        """
        try:
            connected = await self.check_connectivity(config)
        except Exception as e:
            logger.error("connectivity_probe_unexpected_error", error=str(e), error_type=type(e).__name__)
            return ChatOutcome.unexpected_error(str(e))

        if not connected:
            return ChatOutcome.network_unavailable()

        if not config.api_key:
            logger.error("chat_config_missing_api_key")
            return ChatOutcome.configuration_missing()

        if not is_valid_endpoint(config.endpoint):
            logger.error("chat_config_invalid_endpoint", endpoint=config.endpoint)
            return ChatOutcome.configuration_invalid()

        payload = build_payload(prompt, config)

        logger.info(
            "chat_request_started",
            model=config.model,
            endpoint=config.endpoint,
            prompt_length=len(prompt),
            system_prompt_length=len(config.system_prompt),
            temperature=config.temperature,
        )
        logger.debug("chat_request_payload", payload=payload)

        try:
            response = await self.send_with_retry(payload, config)
        except httpx.TransportError as e:
            return ChatOutcome.transport_failure(classify_transport_error(e), str(e))
        except httpx.InvalidURL as e:
            logger.error("chat_config_invalid_endpoint", endpoint=config.endpoint, error=str(e))
            return ChatOutcome.configuration_invalid()
        except httpx.HTTPError as e:
            logger.error("chat_request_error", error=str(e), error_type=type(e).__name__)
            return ChatOutcome.transport_failure(TransportErrorKind.OTHER, str(e))
        except Exception as e:
            logger.error("chat_request_unexpected_error", error=str(e), error_type=type(e).__name__)
            return ChatOutcome.unexpected_error(str(e))

        if not response.is_success:
            logger.error("chat_http_error", status_code=response.status_code)
            return ChatOutcome.from_status(response.status_code)

        return self._decode(response)

    def _decode(self, response: httpx.Response) -> ChatOutcome:
        try:
            body = ChatCompletionResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(
                "chat_response_decode_failed",
                error_count=e.error_count(),
                body_length=len(response.content),
            )
            return ChatOutcome.decode_error(_describe_validation_error(e))

        content = body.first_content
        if content is None:
            logger.warning("chat_response_empty", status_code=response.status_code)
            return ChatOutcome.empty_content()

        logger.info(
            "chat_request_completed",
            status_code=response.status_code,
            content_length=len(content),
        )
        return ChatOutcome.success(content)


def _describe_validation_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    if location:
        return f"{first['msg']} at '{location}'"
    return first["msg"]
