"""
API Utilities Module
Completion service interface and Groq chat-completions wrapper.
"""

import os
import logging
from typing import Dict, Any, Optional, Protocol
import requests

logger = logging.getLogger(__name__)

DEFAULT_GROQ_URL = 'https://api.groq.com/openai/v1/chat/completions'
DEFAULT_GROQ_MODEL = 'llama-3.3-70b-versatile'


class CompletionError(RuntimeError):
    """Raised when the completion service cannot produce a reply."""


class CompletionClient(Protocol):
    """Anything that turns a system + user prompt into generated text."""

    def complete(self, system_prompt: str, user_prompt: str,
                 max_tokens: int, temperature: float) -> str:
        ...


class GroqClient:
    """Wrapper for the Groq chat-completions API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 api_url: Optional[str] = None, timeout: int = 30):
        self.api_key = api_key or os.getenv('GROQ_API_KEY')
        self.model = model or os.getenv('GROQ_MODEL', DEFAULT_GROQ_MODEL)
        self.api_url = api_url or os.getenv('GROQ_API_URL', DEFAULT_GROQ_URL)
        self.timeout = timeout
        self.session = requests.Session()

    def complete(self, system_prompt: str, user_prompt: str,
                 max_tokens: int = 100, temperature: float = 0.3) -> str:
        """
        Send a single-turn chat request.

        Args:
            system_prompt: Instruction framing the assistant
            user_prompt: The question prompt
            max_tokens: Cap on generated tokens
            temperature: Sampling temperature

        Returns:
            Generated text, stripped of surrounding whitespace
        """
        if not self.api_key:
            raise CompletionError("GROQ_API_KEY not set")

        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}'
        }
        payload = {
            'model': self.model,
            'messages': [
                {'role': 'system', 'content': system_prompt},
                {'role': 'user', 'content': user_prompt}
            ],
            'temperature': temperature,
            'max_tokens': max_tokens
        }

        try:
            response = self.session.post(self.api_url, json=payload, headers=headers,
                                         timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Groq request failed: {e}")
            raise CompletionError(f"Completion request failed: {e}") from e

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"Groq API error {response.status_code}: {message}")
            raise CompletionError(f"Completion API error {response.status_code}: {message}")

        return self._extract_text(response.json())

    def _extract_text(self, data: Dict[str, Any]) -> str:
        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            raise CompletionError("Malformed completion response") from e
        return (content or '').strip()

    def _error_message(self, response: requests.Response) -> str:
        try:
            error = response.json().get('error', {})
            if isinstance(error, dict) and error.get('message'):
                return error['message']
        except (ValueError, AttributeError):
            pass
        return response.reason or 'unknown error'
