"""Model-call collaborator: sends report text to Gemini and parses the reply."""

import json
import logging
from typing import Any, Callable, Dict, Optional, Union

import requests
from pydantic import ValidationError

from .errors import AuthError, ExtractionError, FormatError
from .models import ExtractionResult
from .prompts import RESPONSE_SCHEMA, SYSTEM_INSTRUCTION, build_prompt

logger = logging.getLogger(__name__)

DEFAULT_MODEL = 'gemini-3-pro-preview'
DEFAULT_ENDPOINT = 'https://generativelanguage.googleapis.com/v1beta'
DEFAULT_TIMEOUT = 120
DEFAULT_THINKING_BUDGET = 4000

FORMAT_ERROR_MESSAGE = (
    "The AI reasoning engine failed to format the response correctly. "
    "Try simplifying the text."
)

# Error reasons/statuses the API uses for bad or unentitled keys
_AUTH_REASONS = {'API_KEY_INVALID', 'API_KEY_SERVICE_BLOCKED'}
_AUTH_STATUSES = {'UNAUTHENTICATED', 'PERMISSION_DENIED'}
_ENTITY_NOT_FOUND = 'Requested entity was not found'

Credential = Union[str, Callable[[], Optional[str]]]


def parse_extraction(raw_text: Optional[str]) -> ExtractionResult:
    """
    Parse model output into an ExtractionResult.

    Args:
        raw_text: JSON text returned by the model

    Returns:
        Validated ExtractionResult

    Raises:
        FormatError: If the text is empty, not JSON, or not the expected shape
    """
    if not raw_text or not raw_text.strip():
        logger.error("Model returned an empty response")
        raise FormatError(FORMAT_ERROR_MESSAGE)

    try:
        return ExtractionResult.model_validate(json.loads(raw_text))
    except (ValueError, ValidationError) as e:
        logger.error(f"Failed to parse model response: {e}")
        raise FormatError(FORMAT_ERROR_MESSAGE) from e


class GeminiExtractor:
    """Extracts structured intelligence from report text with a Gemini model."""

    def __init__(self,
                 api_key: Credential,
                 model: str = DEFAULT_MODEL,
                 endpoint: str = DEFAULT_ENDPOINT,
                 timeout: float = DEFAULT_TIMEOUT,
                 thinking_budget: Optional[int] = DEFAULT_THINKING_BUDGET):
        """
        Initialize extractor.

        Args:
            api_key: API key, or a callable returning one when a request is made
            model: Model name
            endpoint: Base URL of the Generative Language API
            timeout: Request timeout in seconds
            thinking_budget: Token budget for model reasoning, None to omit
        """
        self._credential = api_key
        self.model = model
        self.endpoint = endpoint.rstrip('/')
        self.timeout = timeout
        self.thinking_budget = thinking_budget

    @classmethod
    def from_settings(cls, api_key: Credential, settings: Dict[str, Any]) -> 'GeminiExtractor':
        """Build an extractor from the ``model`` section of the configuration."""
        return cls(
            api_key,
            model=settings.get('name', DEFAULT_MODEL),
            endpoint=settings.get('endpoint', DEFAULT_ENDPOINT),
            timeout=settings.get('timeout', DEFAULT_TIMEOUT),
            thinking_budget=settings.get('thinking_budget', DEFAULT_THINKING_BUDGET),
        )

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    def _resolve_api_key(self) -> str:
        api_key = self._credential() if callable(self._credential) else self._credential
        if not api_key:
            raise AuthError("Authentication failed: no API key configured")
        return api_key

    def build_request(self, text: str) -> Dict[str, Any]:
        """Build the generateContent request body for a report."""
        generation_config = {
            'responseMimeType': 'application/json',
            'responseSchema': RESPONSE_SCHEMA,
        }
        if self.thinking_budget is not None:
            generation_config['thinkingConfig'] = {'thinkingBudget': self.thinking_budget}

        return {
            'systemInstruction': {'parts': [{'text': SYSTEM_INSTRUCTION}]},
            'contents': [{'role': 'user', 'parts': [{'text': build_prompt(text)}]}],
            'generationConfig': generation_config,
        }

    def extract(self, text: str) -> ExtractionResult:
        """
        Run one extraction request.

        Args:
            text: Unstructured report text

        Returns:
            ExtractionResult parsed from the model response

        Raises:
            ValueError: If the text is blank
            AuthError: If the credential is missing or rejected
            FormatError: If the model output does not match the schema
            ExtractionError: For transport and other API failures
        """
        if not text or not text.strip():
            raise ValueError("Report text is empty")

        api_key = self._resolve_api_key()
        logger.info(f"Requesting extraction from {self.model} ({len(text)} chars)")

        try:
            response = requests.post(
                self.url,
                json=self.build_request(text),
                headers={'x-goog-api-key': api_key},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Extraction request failed: {e}")
            raise ExtractionError(f"Extraction request failed: {e}") from e

        if response.status_code != 200:
            raise self._error_from_response(response)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Response body is not JSON: {e}")
            raise FormatError(FORMAT_ERROR_MESSAGE) from e

        result = parse_extraction(self._response_text(payload))
        logger.info(f"Extraction complete: {result.counts()}")
        return result

    def _response_text(self, payload: Any) -> Optional[str]:
        """Join the non-thought text parts of the first candidate, None if the body is malformed."""
        if not isinstance(payload, dict):
            return None

        candidates = payload.get('candidates')
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return None

        content = candidates[0].get('content')
        parts = content.get('parts') if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return None

        texts = [part['text'] for part in parts
                 if isinstance(part, dict) and isinstance(part.get('text'), str)
                 and not part.get('thought')]
        return ''.join(texts)

    def _error_from_response(self, response: requests.Response) -> ExtractionError:
        """Classify a non-200 API response."""
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get('error') if isinstance(body, dict) else None
        if not isinstance(error, dict):
            error = {'message': error} if isinstance(error, str) else {}

        message = error.get('message')
        if not isinstance(message, str) or not message:
            message = response.text or f"HTTP {response.status_code}"
        status = error.get('status') if isinstance(error.get('status'), str) else ''
        details = error.get('details')
        reasons = {detail.get('reason') for detail in details
                   if isinstance(detail, dict) and isinstance(detail.get('reason'), str)
                   } if isinstance(details, list) else set()

        logger.error(f"Extraction API error {response.status_code}: {message}")

        if (response.status_code in (401, 403)
                or status in _AUTH_STATUSES
                or reasons & _AUTH_REASONS
                or _ENTITY_NOT_FOUND in message):
            return AuthError(f"Authentication failed: {message}")

        return ExtractionError(f"Extraction engine failed: {message}")


def extract_report(text: str, api_key: Credential,
                   settings: Optional[Dict[str, Any]] = None) -> ExtractionResult:
    """
    Extract structured intelligence from a report.

    Args:
        text: Unstructured report text
        api_key: API key or credential provider
        settings: ``model`` configuration section

    Returns:
        ExtractionResult
    """
    extractor = GeminiExtractor.from_settings(api_key, settings or {})
    return extractor.extract(text)
