#!/usr/bin/env python3
# artgen/providers.py
"""
Text-generation backends for `artgen gen`.

- openai:  chat completions over HTTPS (api key from config or OPENAI_API_KEY)
- ollama:  local /api/generate endpoint (host from config or OLLAMA_HOST)
- offline: canned templates, no network

HTTP sessions retry on 429/5xx using urllib3 Retry. Every failure surfaces
as ProviderError so the CLI can fall back to the offline generator.
"""

from __future__ import annotations

import logging
import os
import random
from typing import Dict, List, Mapping, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from artgen.config import Config
from artgen.errors import ProviderConfigError, ProviderError, UnknownProviderError
from artgen.version import __version__

log = logging.getLogger(__name__)

__all__ = [
    "Provider",
    "OpenAIProvider",
    "OllamaProvider",
    "OfflineProvider",
    "build_provider",
    "generate",
    "make_session",
    "system_prompt",
]

DEFAULT_OLLAMA_HOST = "http://localhost:11434"
USER_AGENT = f"artgen/{__version__}"


def system_prompt(style: str) -> str:
    return (
        f"You are an expert art generator. Create a piece of art in the style of '{style}' "
        "based on the following prompt. Only return the art itself, with no additional text, "
        "explanation, or markdown."
    )


def make_session(retries: int = 2, pool_size: int = 2) -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        backoff_factor=0.5,
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=False,            # POST included
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=pool_size, pool_maxsize=pool_size)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session

# -------------------------
# Providers
# -------------------------

class Provider:
    """Interface for all text-generation backends."""
    name: str = "base"

    def generate(self, prompt: str, model: Optional[str] = None, style: str = "ascii") -> str:
        raise NotImplementedError


class _HttpProvider(Provider):
    def __init__(self, session: Optional[requests.Session] = None, timeout: Tuple[float, float] = (5.0, 60.0)):
        self.session = session or make_session()
        self.timeout = timeout

    def _post(self, url: str, payload: dict, headers: Optional[dict] = None) -> dict:
        log.info("%s: POST %s", self.name, url)
        try:
            r = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise ProviderError(f"{self.name} request failed with HTTP {status}") from e
        except requests.RequestException as e:
            raise ProviderError(f"{self.name} request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"{self.name} returned invalid JSON") from e


class OpenAIProvider(_HttpProvider):
    name = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        default_model: str = "gpt-4o-mini",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.default_model = default_model

    def generate(self, prompt: str, model: Optional[str] = None, style: str = "ascii") -> str:
        if not self.api_key:
            raise ProviderConfigError("no OpenAI API key; set OPENAI_API_KEY or providers.openai.api_key")
        payload = {
            "model": model or self.default_model,
            "messages": [
                {"role": "system", "content": system_prompt(style)},
                {"role": "user", "content": prompt},
            ],
        }
        data = self._post(
            f"{self.base_url}/chat/completions",
            payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError("openai response has no message content") from e
        if not isinstance(content, str):
            raise ProviderError("openai response has no message content")
        return content


class OllamaProvider(_HttpProvider):
    name = "ollama"

    def __init__(self, host: Optional[str] = None, default_model: str = "llama2", **kwargs):
        super().__init__(**kwargs)
        self.host = (host or DEFAULT_OLLAMA_HOST).rstrip("/")
        self.default_model = default_model

    def generate(self, prompt: str, model: Optional[str] = None, style: str = "ascii") -> str:
        payload = {
            "model": model or self.default_model,
            "prompt": f"{system_prompt(style)}\n\n{prompt}",
            "stream": False,
        }
        data = self._post(f"{self.host}/api/generate", payload)
        content = data.get("response") if isinstance(data, dict) else None
        if not isinstance(content, str):
            raise ProviderError("ollama response has no 'response' field")
        return content


_TEMPLATES: Dict[str, List[str]] = {
    "ascii": [
        "\n"
        "   .    .        *        .\n"
        "      _.-._        *\n"
        "   .-'     '-.    .     .\n"
        "  (  *   *   )  {prompt}\n"
        "   '-._____.-'       .\n",
        "\n"
        "  . . .     .  .   .   .     .\n"
        "    .--.      .--.   {prompt}\n"
        "   (    )    (    )   .  .\n"
        "    '--'      '--'\n",
    ],
    "chaos": [
        "▓░▒▓░ {prompt} ░▒▓░\n~*~*~*~*~",
        "//\\\\//\\\\ {prompt} \\\\//\\\\//",
    ],
    "verse": [
        "{prompt}\n    — an echo in ascii —",
    ],
    "banner": [
        "##########\n# {prompt} #\n##########",
    ],
}


class OfflineProvider(Provider):
    """Template-based generator. Pass a seeded Random for repeatable picks."""
    name = "offline"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @staticmethod
    def styles() -> List[str]:
        return list(_TEMPLATES)

    def generate(self, prompt: str, model: Optional[str] = None, style: str = "ascii") -> str:
        templates = _TEMPLATES.get(style, _TEMPLATES["ascii"])
        # Prompts may contain braces, so no str.format.
        return self.rng.choice(templates).replace("{prompt}", prompt)

# -------------------------
# Factory
# -------------------------

def build_provider(
    name: str,
    cfg: Optional[Config] = None,
    session: Optional[requests.Session] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Provider:
    cfg = cfg or Config()
    env = os.environ if env is None else env
    p = cfg["providers"]

    if name == "offline":
        return OfflineProvider()

    timeout = (p["connect_timeout_s"], p["read_timeout_s"])
    session = session or make_session(retries=p["retries"])
    if name == "openai":
        oa = p["openai"]
        return OpenAIProvider(
            api_key=oa.get("api_key") or env.get("OPENAI_API_KEY"),
            base_url=oa["base_url"],
            default_model=oa["model"],
            session=session,
            timeout=timeout,
        )
    if name == "ollama":
        ol = p["ollama"]
        return OllamaProvider(
            host=ol.get("host") or env.get("OLLAMA_HOST"),
            default_model=ol["model"],
            session=session,
            timeout=timeout,
        )
    raise UnknownProviderError(f"unknown provider {name!r} (expected one of: openai, ollama, offline)")


def generate(
    prompt: str,
    provider: str = "openai",
    model: Optional[str] = None,
    style: str = "ascii",
    cfg: Optional[Config] = None,
    session: Optional[requests.Session] = None,
) -> str:
    return build_provider(provider, cfg, session=session).generate(prompt, model=model, style=style)
