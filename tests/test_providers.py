import random
import unittest
from unittest import mock

import requests

from artgen.config import Config
from artgen.errors import ProviderConfigError, ProviderError, UnknownProviderError
from artgen.providers import (
    OfflineProvider,
    OllamaProvider,
    OpenAIProvider,
    build_provider,
    generate,
    make_session,
    system_prompt,
)


def _session(payload=None, exc=None, status=200):
    response = mock.Mock()
    response.status_code = status
    response.json.return_value = payload
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    session = mock.Mock()
    if exc is not None:
        session.post.side_effect = exc
    else:
        session.post.return_value = response
    return session


class OpenAIProviderTests(unittest.TestCase):
    def test_chat_request(self):
        session = _session({"choices": [{"message": {"content": "/\\_/\\"}}]})
        provider = OpenAIProvider("sk-test", "https://api.example/v1/", "gpt-x", session=session)
        self.assertEqual(provider.generate("a cat", style="chaos"), "/\\_/\\")

        args, kwargs = session.post.call_args
        self.assertEqual(args[0], "https://api.example/v1/chat/completions")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer sk-test")
        body = kwargs["json"]
        self.assertEqual(body["model"], "gpt-x")
        self.assertEqual(body["messages"][0], {"role": "system", "content": system_prompt("chaos")})
        self.assertEqual(body["messages"][1], {"role": "user", "content": "a cat"})

    def test_model_override(self):
        session = _session({"choices": [{"message": {"content": "x"}}]})
        OpenAIProvider("k", session=session).generate("p", model="other")
        self.assertEqual(session.post.call_args[1]["json"]["model"], "other")

    def test_missing_key(self):
        session = _session({})
        with self.assertRaises(ProviderConfigError):
            OpenAIProvider(None, session=session).generate("p")
        session.post.assert_not_called()

    def test_http_error(self):
        session = _session({"error": "boom"}, status=500)
        with self.assertRaises(ProviderError) as cm:
            OpenAIProvider("k", session=session).generate("p")
        self.assertIn("500", str(cm.exception))

    def test_connection_error(self):
        session = _session(exc=requests.ConnectionError("refused"))
        with self.assertRaises(ProviderError):
            OpenAIProvider("k", session=session).generate("p")

    def test_malformed_response(self):
        session = _session({"choices": []})
        with self.assertRaises(ProviderError):
            OpenAIProvider("k", session=session).generate("p")


class OllamaProviderTests(unittest.TestCase):
    def test_generate_request(self):
        session = _session({"response": "<art>"})
        provider = OllamaProvider("http://gpu-box:11434/", session=session)
        self.assertEqual(provider.generate("a tree"), "<art>")
        args, kwargs = session.post.call_args
        self.assertEqual(args[0], "http://gpu-box:11434/api/generate")
        self.assertEqual(kwargs["json"], {
            "model": "llama2",
            "prompt": system_prompt("ascii") + "\n\na tree",
            "stream": False,
        })

    def test_default_host(self):
        self.assertEqual(OllamaProvider(session=_session({})).host, "http://localhost:11434")

    def test_missing_field(self):
        with self.assertRaises(ProviderError):
            OllamaProvider(session=_session({"done": True})).generate("p")


class OfflineProviderTests(unittest.TestCase):
    def test_prompt_interpolated(self):
        provider = OfflineProvider(random.Random(7))
        for style in OfflineProvider.styles():
            art = provider.generate("moon {x}", style=style)
            self.assertIn("moon {x}", art)
            self.assertNotIn("{prompt}", art)

    def test_banner(self):
        art = OfflineProvider().generate("hi", style="banner")
        self.assertEqual(art, "##########\n# hi #\n##########")

    def test_verse(self):
        art = OfflineProvider().generate("tide", style="verse")
        self.assertEqual(art, "tide\n    — an echo in ascii —")

    def test_unknown_style_uses_ascii(self):
        self.assertEqual(
            OfflineProvider(random.Random(5)).generate("p", style="watercolor"),
            OfflineProvider(random.Random(5)).generate("p", style="ascii"),
        )

    def test_seeded_is_repeatable(self):
        a = OfflineProvider(random.Random(3)).generate("p", style="chaos")
        b = OfflineProvider(random.Random(3)).generate("p", style="chaos")
        self.assertEqual(a, b)


class FactoryTests(unittest.TestCase):
    def test_openai_key_from_env(self):
        provider = build_provider("openai", Config(), session=_session({}), env={"OPENAI_API_KEY": "sk-env"})
        self.assertIsInstance(provider, OpenAIProvider)
        self.assertEqual(provider.api_key, "sk-env")
        self.assertEqual(provider.timeout, (5.0, 60.0))

    def test_config_key_wins(self):
        cfg = Config()
        cfg.update({"providers": {"openai": {"api_key": "sk-cfg"}}})
        provider = build_provider("openai", cfg, session=_session({}), env={"OPENAI_API_KEY": "sk-env"})
        self.assertEqual(provider.api_key, "sk-cfg")

    def test_ollama_host_from_env(self):
        provider = build_provider("ollama", Config(), session=_session({}), env={"OLLAMA_HOST": "http://h:1"})
        self.assertEqual(provider.host, "http://h:1")

    def test_unknown(self):
        with self.assertRaises(UnknownProviderError):
            build_provider("skynet", Config(), env={})

    def test_generate_offline(self):
        self.assertIn("owl", generate("owl", "offline", style="verse"))

    def test_make_session_retries(self):
        session = make_session(retries=4)
        adapter = session.get_adapter("https://api.openai.com")
        self.assertEqual(adapter.max_retries.total, 4)
        self.assertIn(503, adapter.max_retries.status_forcelist)


if __name__ == "__main__":
    unittest.main()
