"""Client for the DNS server app configuration endpoints and remote UI schemas."""

import logging
from typing import NoReturn, Optional

import requests

from .config import ServerConfig
from .consts import (
    ENDPOINT_APP_CONFIG_GET,
    ENDPOINT_APP_CONFIG_SET,
    HTTP_MAX_RETRIES,
    HTTP_RETRY_DELAY,
)
from .enums import ResponseStatus
from .errors import AppFormException, AuthenticationError, ClientError, ServerError
from .utils import retry, sanitize

logger = logging.getLogger(__name__)


def _handle_request_exception(exception: requests.RequestException, operation: str) -> NoReturn:
    """Log a transport failure and re-raise it as an appform error.

    4XX responses become :class:`ClientError`, everything else
    :class:`AppFormException`.
    """
    status_code = getattr(exception.response, "status_code", None)
    logger.error(f"Failed to {operation}: status_code={status_code or 'N/A'}")

    if status_code and 400 <= status_code < 500:
        raise ClientError(f"Failed to {operation} (status: {status_code})") from exception
    raise AppFormException(f"Failed to {operation} (status: {status_code or 'N/A'})") from exception


def _check_http_status(_args, _kwargs, error, _attempt):
    status_code = getattr(getattr(error, "response", None), "status_code", None)
    if status_code and 400 <= status_code < 500:
        raise ClientError(f"Client error {status_code}: not retrying") from error


class AppConfigClient:
    """Loads and saves app configuration text on a DNS server.

    Only the two app-config endpoints and the schema download used by a form
    session are covered.
    """

    def __init__(self, config: ServerConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.token = config.token
        self.node = config.node
        self.timeout = config.timeout
        self.verify_ssl = config.verify_ssl
        self.session = session or requests.Session()

        logger.debug(
            f"AppConfigClient initialized: url={config.url}, "
            f"token={sanitize(self.token)}, node={self.node}, timeout={self.timeout}"
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def get_config(self, app_name: str, node: Optional[str] = None) -> str:
        """Return the raw configuration text of ``app_name`` (empty when unset)."""
        if not app_name:
            raise AppFormException("App name cannot be empty")

        params = {"token": self.token, "name": app_name}
        node = node or self.node
        if node:
            params["node"] = node

        logger.info(f"Loading configuration of app '{app_name}'")
        try:
            payload = self._get_json(f"{self.base_url}{ENDPOINT_APP_CONFIG_GET}", params)
        except requests.RequestException as e:
            _handle_request_exception(e, f"load configuration of app '{app_name}'")

        response = self._unwrap(payload, f"load configuration of app '{app_name}'")
        return (response or {}).get("config") or ""

    def set_config(self, app_name: str, config_text: str, node: Optional[str] = None) -> None:
        """Store ``config_text`` as the configuration of ``app_name``.

        Failures are raised to the caller and never retried.
        """
        if not app_name:
            raise AppFormException("App name cannot be empty")

        data = {"name": app_name, "config": config_text}
        node = node or self.node
        if node:
            data["node"] = node

        logger.info(f"Saving configuration of app '{app_name}' ({len(config_text.encode('utf-8'))} bytes)")
        try:
            response = self.session.post(
                f"{self.base_url}{ENDPOINT_APP_CONFIG_SET}",
                params={"token": self.token},
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            _handle_request_exception(e, f"save configuration of app '{app_name}'")

        try:
            payload = response.json()
        except ValueError as e:
            raise ServerError(f"Invalid server response while saving app '{app_name}'") from e

        self._unwrap(payload, f"save configuration of app '{app_name}'")
        logger.info(f"Configuration of app '{app_name}' saved")

    def fetch_schema(self, url: str) -> str:
        """Download a UI schema document and return its raw text."""
        if not url:
            raise AppFormException("Schema URL cannot be empty")

        logger.info(f"Fetching UI schema: {url}")
        try:
            return self._get_text(url)
        except requests.RequestException as e:
            _handle_request_exception(e, "fetch UI schema")

    @retry(
        times=HTTP_MAX_RETRIES,
        initial_delay=HTTP_RETRY_DELAY,
        backoff="exponential",
        exceptions=(requests.RequestException,),
        on_retry=_check_http_status,
    )
    def _get_json(self, url: str, params: dict) -> dict:
        response = self.session.get(
            url,
            params=params,
            headers={"Accept": "application/json"},
            timeout=self.timeout,
            verify=self.verify_ssl,
        )
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise ServerError(f"Invalid JSON response from {url}") from e

    @retry(
        times=HTTP_MAX_RETRIES,
        initial_delay=HTTP_RETRY_DELAY,
        backoff="exponential",
        exceptions=(requests.RequestException,),
        on_retry=_check_http_status,
    )
    def _get_text(self, url: str) -> str:
        response = self.session.get(url, timeout=self.timeout, verify=self.verify_ssl)
        response.raise_for_status()
        return response.text

    @staticmethod
    def _unwrap(payload: dict, operation: str) -> Optional[dict]:
        if not isinstance(payload, dict):
            raise ServerError(f"Failed to {operation}: unexpected response shape")

        status = payload.get("status")
        if status == ResponseStatus.OK.value:
            return payload.get("response")

        message = payload.get("errorMessage") or status or "unknown error"
        logger.error(f"Failed to {operation}: {message}")
        if status == ResponseStatus.INVALID_TOKEN.value:
            raise AuthenticationError(f"Failed to {operation}: session token is invalid or expired")
        raise ServerError(f"Failed to {operation}: {message}")
