"""
Fourier Viewer - Analysis Session
=================================
HTTP client for the remote analysis service and the request lifecycle
state machine (idle -> loading -> success | error).
"""

from typing import Any, Optional

import requests

from config import ANALYSIS_TIMEOUT, ANALYZE_PATH, API_URL
from core.models import (
    AnalysisRequest,
    AnalysisResult,
    ChartDataset,
    SessionState,
    SessionStatus,
)
from helpers import logger
from ops.assembler import assemble_chart_data


class AnalysisServiceError(Exception):
    """The analysis service could not produce a result"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidTransitionError(RuntimeError):
    """A session transition was requested from the wrong state"""


class AnalysisClient:
    """Posts analysis requests to the remote service."""

    def __init__(
        self,
        base_url: str = API_URL,
        timeout: Optional[float] = ANALYSIS_TIMEOUT,
        http: Optional[Any] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = http if http is not None else requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{ANALYZE_PATH}"

    @property
    def connection_message(self) -> str:
        return (
            "Error al conectar con la API. "
            f"Asegúrate de que esté corriendo en {self.base_url}."
        )

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Send one request and wait for the result.

        Args:
            request: Normalized analysis request

        Returns:
            AnalysisResult wrapping the JSON body

        Raises:
            AnalysisServiceError: On transport failure, non-success status
                (message is the body's 'detail' when present) or a body that
                is not a JSON object
        """
        logger.info(f"POST {self.endpoint} ({request.function_kind.value}, "
                    f"{request.n_harmonics} harmonics)")
        try:
            response = self._http.post(
                self.endpoint, json=request.to_payload(), timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Analysis request failed: {e}")
            raise AnalysisServiceError(self.connection_message) from e

        if not response.ok:
            detail = _error_detail(response)
            logger.error(f"Analysis service returned {response.status_code}: {detail}")
            raise AnalysisServiceError(
                detail or self.connection_message, status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise AnalysisServiceError(self.connection_message) from e
        if not isinstance(data, dict):
            raise AnalysisServiceError(self.connection_message)

        return AnalysisResult(data)


def _error_detail(response: Any) -> Optional[str]:
    """Extract the 'detail' string from an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"] or None
    return None


class AnalysisSessionController:
    """
    Owns the lifecycle state of the current analysis.

    At most one request is in flight: submit() while loading is ignored.
    Entering loading or error discards the previous result so stale charts
    are never shown next to a new banner.
    """

    def __init__(self, client: Optional[AnalysisClient] = None):
        self.client = client if client is not None else AnalysisClient()
        self._state = SessionState.idle()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    def begin(self, request: AnalysisRequest) -> SessionState:
        if self._state.is_loading:
            raise InvalidTransitionError("A request is already in flight")
        self._state = SessionState.loading(request)
        return self._state

    def complete(self, result: AnalysisResult) -> SessionState:
        self._require_loading("complete")
        self._state = SessionState.success(self._state.request, result)
        return self._state

    def fail(self, message: str) -> SessionState:
        self._require_loading("fail")
        self._state = SessionState.error(self._state.request, message)
        return self._state

    def reset(self) -> SessionState:
        self._state = SessionState.idle()
        return self._state

    def submit(self, request: AnalysisRequest) -> SessionState:
        """
        Run one full request cycle through the client.

        Returns:
            The resulting state (success or error), or the unchanged
            loading state when another request is still in flight
        """
        if self._state.is_loading:
            logger.warning("Ignoring analysis submit while a request is in flight")
            return self._state

        self.begin(request)
        try:
            result = self.client.analyze(request)
        except AnalysisServiceError as e:
            return self.fail(e.message)
        return self.complete(result)

    def chart_dataset(self) -> Optional[ChartDataset]:
        """Assemble chart data for the current result, None unless successful."""
        if self._state.status is not SessionStatus.SUCCESS:
            return None
        return assemble_chart_data(
            self._state.result, n_harmonics=self._state.request.n_harmonics
        )

    def _require_loading(self, action: str):
        if not self._state.is_loading:
            raise InvalidTransitionError(
                f"Cannot {action} from state {self._state.status.value}"
            )
