"""Text generation through an Ollama server.

Ollama serves an OpenAI compatible API under ``/v1``, so the ``openai``
client does the talking. Settings come from the environment:

- ``OLLAMA_URL`` (or ``http://$OLLAMA_HOST``): server base URL
- ``OLLAMA_MODEL``: model name
- ``OLLAMA_MODEL_OPTIONS``: JSON object of sampling options
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from typing import Any

import httpx
import openai
from pydantic import BaseModel, Field

from .errors import CollaboratorError, InvalidArgumentError

DEFAULT_HOST = "localhost:11434"
DEFAULT_MODEL = "llama3.1"
DEFAULT_OPTIONS: dict[str, Any] = {"temperature": 0, "top_p": 1, "min_p": 0.1}


class OllamaSettings(BaseModel):
    """Connection and sampling settings for the model server.

    Attributes:
        base_url: Server root, without the ``/v1`` suffix.
        model: Model to generate with.
        options: Sampling options; ``temperature`` and ``top_p`` are sent as
            request fields, everything else passes through untouched.
        read_timeout: Seconds to wait for a response.
        connect_timeout: Seconds to wait for a connection.
    """

    base_url: str = f"http://{DEFAULT_HOST}"
    model: str = DEFAULT_MODEL
    options: dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_OPTIONS))
    read_timeout: float = 600
    connect_timeout: float = 60

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> OllamaSettings:
        env = os.environ if env is None else env
        base_url = env.get("OLLAMA_URL", "").strip()
        if not base_url:
            base_url = f"http://{env.get('OLLAMA_HOST', '').strip() or DEFAULT_HOST}"

        raw_options = env.get("OLLAMA_MODEL_OPTIONS") or env.get("OLLAMA_OPTIONS") or "{}"
        try:
            user_options = json.loads(raw_options)
        except json.JSONDecodeError as exc:
            raise InvalidArgumentError(f"Invalid JSON for OLLAMA_MODEL_OPTIONS: {exc}") from exc
        if not isinstance(user_options, dict):
            raise InvalidArgumentError("OLLAMA_MODEL_OPTIONS must be a JSON object")

        return cls(
            base_url=base_url.rstrip("/"),
            model=env.get("OLLAMA_MODEL", "").strip() or DEFAULT_MODEL,
            options={**DEFAULT_OPTIONS, **user_options},
        )


class TextGenerator:
    """Generate text from a system prompt and a user prompt.

    The client is created on first use and kept for the generator's
    lifetime. Requests are never retried.
    """

    def __init__(self, settings: OllamaSettings | None = None) -> None:
        self.settings = settings or OllamaSettings()
        self._client: openai.OpenAI | None = None

    @property
    def client(self) -> openai.OpenAI:
        if self._client is None:
            self._client = openai.OpenAI(
                base_url=f"{self.settings.base_url}/v1",
                api_key="ollama",
                timeout=httpx.Timeout(
                    self.settings.read_timeout, connect=self.settings.connect_timeout
                ),
                max_retries=0,
            )
        return self._client

    def generate(self, system: str, prompt: str) -> str:
        """Return the model's answer to ``prompt``.

        Raises:
            CollaboratorError: On connection errors, timeouts, or an error
                reply from the server.
        """
        options = dict(self.settings.options)
        temperature = options.pop("temperature", None)
        top_p = options.pop("top_p", None)
        request: dict[str, Any] = {}
        if temperature is not None:
            request["temperature"] = temperature
        if top_p is not None:
            request["top_p"] = top_p
        if options:
            request["extra_body"] = options

        try:
            response = self.client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                stream=False,
                **request,
            )
        except openai.OpenAIError as exc:
            raise CollaboratorError(
                f"Text generation with {self.settings.model} at "
                f"{self.settings.base_url} failed: {exc}"
            ) from exc

        if not response.choices:
            raise CollaboratorError(f"Model {self.settings.model} returned no choices")
        return response.choices[0].message.content or ""
