"""Maintenance advice from a text-generation API."""

from __future__ import annotations

import logging
from typing import Any, Final, Protocol, runtime_checkable

import requests
from typing_extensions import TypedDict

from batteryguard.models.battery import Battery
from batteryguard.utils.formatting import format_level

from .errors import AdviceError, MissingCredentialError, NetworkError, ParseError

logger: Final = logging.getLogger(__name__)

API_URL: Final = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
DEFAULT_MODEL: Final = "gemini-2.5-flash"

NO_CREDENTIAL_MESSAGE: Final = (
    "Advice unavailable: no API key configured. "
    "Set advice_api_key in config.yaml or GEMINI_API_KEY in the environment."
)
SERVICE_FAILURE_MESSAGE: Final = (
    "Could not reach the advice service. Check your network connection and API key."
)
EMPTY_ADVICE_MESSAGE: Final = "The advice service returned no suggestions. Please try again later."


class _Part(TypedDict, total=False):
    text: str


class _Content(TypedDict, total=False):
    parts: list[_Part]


class _Candidate(TypedDict, total=False):
    content: _Content


class GenerateContentResponse(TypedDict, total=False):
    """Subset of the generateContent response that is read."""

    candidates: list[_Candidate]


@runtime_checkable
class AdviceProvider(Protocol):
    """Protocol for best-effort battery advice.

    Implementations must never raise; any problem is reported as text.
    """

    def get_advice(self, battery: Battery) -> str:
        """Return maintenance advice for a battery."""
        ...


def build_prompt(battery: Battery) -> str:
    """Build the advice request from a battery's full attribute snapshot."""
    return (
        "As an electrochemical engineer, assess the health of the battery below "
        "and give maintenance advice. Keep it concise and focus on safety risks "
        "and ways to extend its life.\n\n"
        "Battery data:\n"
        f"- Name: {battery.name}\n"
        f"- Type: {battery.type.label}\n"
        f"- Rated capacity: {battery.capacity:g} mAh\n"
        f"- Current voltage: {battery.voltage:g} V\n"
        f"- Current charge: {format_level(battery.charge_level)}\n"
        f"- Cycle count: {battery.cycle_count}\n"
        f"- Internal resistance: {battery.internal_resistance:g} mOhm\n"
        f"- Purchase date: {battery.purchase_date.isoformat()}\n"
        f"- Last charged: {battery.last_charge_date.isoformat()}\n\n"
        "Please provide:\n"
        "1. A health assessment based on cycle count and internal resistance.\n"
        "2. Whether the current storage state is safe (e.g. a LiPo stored fully charged).\n"
        "3. The next maintenance step (charge, discharge or retire)."
    )


class NullAdvisor:
    """Advisor used when no API key is configured."""

    def get_advice(self, battery: Battery) -> str:
        return NO_CREDENTIAL_MESSAGE


class GeminiAdvisor:
    """Client for the Generative Language ``generateContent`` endpoint.

    ``fetch_advice`` raises AdviceError subclasses; ``get_advice`` is the
    AdviceProvider entry point and degrades every failure to a fixed
    informational message.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        timeout: float = 20,
    ) -> None:
        """Initialize the advice client.

        Args:
            api_key: API key; None or empty disables the call
            model: Model name
            timeout: Timeout for API requests in seconds
        """
        self.api_key = api_key
        self.model = model
        self.timeout = timeout

    def fetch_advice(self, battery: Battery) -> str:
        """Request advice for a battery.

        Returns:
            Advice text (possibly empty)

        Raises:
            MissingCredentialError: When no API key is configured
            NetworkError: When network connectivity issues occur
            AdviceError: For HTTP errors from the service
            ParseError: When the response body is not understood
        """
        if not self.api_key:
            raise MissingCredentialError()

        body = {"contents": [{"parts": [{"text": build_prompt(battery)}]}]}
        try:
            resp = requests.post(
                API_URL.format(model=self.model),
                json=body,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NetworkError(f"Network error: {exc}", exc) from exc

        try:
            payload: Any = resp.json()
        except ValueError as exc:
            if resp.status_code != 200:
                raise AdviceError(resp.status_code, resp.text) from exc
            raise ParseError("Response is not JSON", exc) from exc

        if resp.status_code != 200:
            raise AdviceError.from_response(
                payload if isinstance(payload, dict) else {}, resp.status_code
            )

        return self._extract_text(payload)

    @staticmethod
    def _extract_text(payload: GenerateContentResponse) -> str:
        try:
            parts = payload["candidates"][0]["content"]["parts"]
            return "".join(part.get("text", "") for part in parts).strip()
        except (KeyError, IndexError, TypeError) as exc:
            raise ParseError("Unexpected response structure", exc) from exc

    def get_advice(self, battery: Battery) -> str:
        """Return advice text, or an informational message on any failure."""
        try:
            text = self.fetch_advice(battery)
        except MissingCredentialError:
            return NO_CREDENTIAL_MESSAGE
        except AdviceError as err:
            logger.warning("Advice request failed (%s): %s", err.code, err.message)
            return SERVICE_FAILURE_MESSAGE
        except Exception as exc:
            logger.warning("Advice request failed unexpectedly: %s", exc)
            return SERVICE_FAILURE_MESSAGE
        return text or EMPTY_ADVICE_MESSAGE


def create_advisor(api_key: str | None, model: str = DEFAULT_MODEL, timeout: float = 20) -> AdviceProvider:
    """Create an advisor based on configuration.

    Args:
        api_key: API key (empty means advice is unavailable)
        model: Model name
        timeout: Request timeout in seconds

    Returns:
        An AdviceProvider implementation
    """
    if not api_key:
        return NullAdvisor()
    return GeminiAdvisor(api_key, model, timeout)
