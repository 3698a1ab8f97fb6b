"""Unit Tests for the local Model Session and the Ollama engine"""

import time
import pytest
import requests
from unittest.mock import MagicMock, patch

from c9ai.core.errors import EmptyResponse, InferenceTimeout, ModelNotInstalled
from c9ai.models.providers.base import BaseLLMProvider
from c9ai.models.providers.ollama import OllamaProvider
from c9ai.models.session import ModelSession, SessionState, find_model_files
from c9ai.models.templates import LLAMA2, PHI3, ZEPHYR, template_for


class FakeProvider(BaseLLMProvider):
    def __init__(self, response="@action: list files", fail_load=False, delay=0.0):
        super().__init__()
        self.response = response
        self.fail_load = fail_load
        self.delay = delay
        self.loads = 0
        self.prompts = []

    def load(self, model_path):
        self.loads += 1
        if self.fail_load:
            raise RuntimeError("engine offline")

    def complete(self, prompt, max_tokens=150, temperature=0.7, stop=None, repeat_penalty=1.1):
        self.prompts.append(prompt)
        if self.delay:
            time.sleep(self.delay)
        return self.response


@pytest.fixture
def models_dir(tmp_path):
    directory = tmp_path / "models"
    directory.mkdir()
    (directory / "phi-3-mini-4k-instruct-q4.gguf").write_bytes(b"gguf")
    return directory


class TestInitialize:
    def test_initialize_is_idempotent(self, models_dir):
        """Test that the model is loaded once however often initialize runs"""
        provider = FakeProvider()
        session = ModelSession(models_dir, provider)
        assert session.state == SessionState.UNINITIALIZED

        assert session.initialize() == SessionState.READY
        assert session.initialize() == SessionState.READY
        assert provider.loads == 1
        assert session.ready
        assert not session.fallback_mode

    def test_no_model_files(self, tmp_path):
        session = ModelSession(tmp_path, FakeProvider())
        with pytest.raises(ModelNotInstalled) as exc_info:
            session.initialize()
        assert "c9ai models install phi-3" in str(exc_info.value)
        assert session.state == SessionState.UNINITIALIZED

    def test_engine_unavailable_degrades(self, models_dir):
        provider = FakeProvider(fail_load=True)
        session = ModelSession(models_dir, provider)
        assert session.initialize() == SessionState.DEGRADED
        assert session.fallback_mode
        session.initialize()
        assert provider.loads == 1

    def test_find_model_files_ignores_other_files(self, models_dir):
        (models_dir / "notes.txt").write_text("x")
        (models_dir / "tiny.bin").write_bytes(b"bin")
        assert [p.name for p in find_model_files(models_dir)] == [
            "phi-3-mini-4k-instruct-q4.gguf", "tiny.bin",
        ]


class TestInfer:
    def test_prompt_uses_model_template(self, models_dir):
        provider = FakeProvider()
        session = ModelSession(models_dir, provider)
        session.initialize()
        assert session.infer("list my files") == "@action: list files"
        assert provider.prompts[0].startswith("<|system|>")
        assert "<|user|>list my files<|end|>" in provider.prompts[0]

    def test_empty_response(self, models_dir):
        session = ModelSession(models_dir, FakeProvider(response="   "))
        session.initialize()
        with pytest.raises(EmptyResponse):
            session.infer("hello")

    def test_timeout(self, models_dir):
        session = ModelSession(models_dir, FakeProvider(delay=1.0), timeout=0.05)
        session.initialize()
        with pytest.raises(InferenceTimeout):
            session.infer("hello")

    def test_infer_requires_ready(self, models_dir):
        session = ModelSession(models_dir, FakeProvider(fail_load=True))
        session.initialize()
        with pytest.raises(RuntimeError):
            session.infer("hello")


class TestTemplates:
    @pytest.mark.parametrize("filename,template", [
        ("phi-3-mini-4k-instruct-q4.gguf", PHI3),
        ("tinyllama-1.1b-chat-v1.0.Q4_K_M.gguf", ZEPHYR),
        ("llama-2-7b-chat.Q4_K_M.gguf", LLAMA2),
        ("mystery.bin", PHI3),
    ])
    def test_template_for(self, filename, template):
        assert template_for(filename) is template


class TestOllamaProvider:
    def test_model_name(self):
        assert OllamaProvider.model_name_for("/m/Phi-3 Mini.gguf") == "c9ai-phi-3-mini"

    @patch("c9ai.models.providers.ollama.requests.get")
    def test_load_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError()
        with pytest.raises(RuntimeError) as exc_info:
            OllamaProvider().load("/m/phi-3.gguf")
        assert "Is Ollama running?" in str(exc_info.value)

    @patch("c9ai.models.providers.ollama.requests.post")
    @patch("c9ai.models.providers.ollama.requests.get")
    def test_load_registers_model(self, mock_get, mock_post):
        mock_get.return_value = MagicMock(json=MagicMock(return_value={"models": []}))
        provider = OllamaProvider()
        provider.load("/m/phi-3.gguf")

        payload = mock_post.call_args.kwargs["json"]
        assert payload["model"] == "c9ai-phi-3"
        assert payload["modelfile"].startswith("FROM ")
        assert provider.model == "c9ai-phi-3"

    @patch("c9ai.models.providers.ollama.requests.post")
    @patch("c9ai.models.providers.ollama.requests.get")
    def test_load_skips_existing_model(self, mock_get, mock_post):
        mock_get.return_value = MagicMock(json=MagicMock(return_value={"models": [{"name": "c9ai-phi-3:latest"}]}))
        OllamaProvider().load("/m/phi-3.gguf")
        mock_post.assert_not_called()

    @patch("c9ai.models.providers.ollama.requests.post")
    def test_complete_sends_raw_prompt(self, mock_post):
        mock_post.return_value = MagicMock(json=MagicMock(return_value={"response": "hi"}))
        provider = OllamaProvider()
        provider.model = "c9ai-phi-3"

        assert provider.complete("<|user|>hello", max_tokens=20, stop=["<|end|>"]) == "hi"
        payload = mock_post.call_args.kwargs["json"]
        assert payload["raw"] is True
        assert payload["options"]["num_predict"] == 20
        assert payload["options"]["stop"] == ["<|end|>"]

    def test_complete_without_model(self):
        with pytest.raises(RuntimeError):
            OllamaProvider().complete("hello")


class TestOllamaErrors:
    """Every engine failure surfaces as RuntimeError"""

    @patch("c9ai.models.providers.ollama.requests.post")
    def test_read_timeout(self, mock_post):
        mock_post.side_effect = requests.exceptions.ReadTimeout("read timed out")
        provider = OllamaProvider()
        provider.model = "c9ai-phi-3"
        with pytest.raises(RuntimeError):
            provider.complete("hello")

    @patch("c9ai.models.providers.ollama.requests.post")
    def test_malformed_body(self, mock_post):
        mock_post.return_value = MagicMock(json=MagicMock(side_effect=ValueError("Expecting value")))
        provider = OllamaProvider()
        provider.model = "c9ai-phi-3"
        with pytest.raises(RuntimeError):
            provider.complete("hello")

    @patch("c9ai.models.providers.ollama.requests.post")
    def test_non_object_body(self, mock_post):
        mock_post.return_value = MagicMock(json=MagicMock(return_value=["unexpected"]))
        provider = OllamaProvider()
        provider.model = "c9ai-phi-3"
        with pytest.raises(RuntimeError):
            provider.complete("hello")

    @patch("c9ai.models.providers.ollama.requests.get")
    def test_load_malformed_tags(self, mock_get):
        mock_get.return_value = MagicMock(json=MagicMock(side_effect=ValueError("Expecting value")))
        with pytest.raises(RuntimeError):
            OllamaProvider().load("/m/phi-3.gguf")

    @patch("c9ai.models.providers.ollama.requests.get")
    def test_session_degrades_on_load_timeout(self, mock_get, models_dir):
        mock_get.side_effect = requests.exceptions.ReadTimeout("read timed out")
        session = ModelSession(models_dir, OllamaProvider())
        assert session.initialize() == SessionState.DEGRADED
