"""Ollama engine (local models) - HTTP ONLY

Registers the installed GGUF file with a local Ollama server and completes
raw, pre-formatted prompts through /api/generate.
"""

import re
import requests
import logging
from pathlib import Path
from typing import Optional, Sequence
from .base import BaseLLMProvider


class OllamaProvider(BaseLLMProvider):
    """Ollama local engine (FREE, runs locally) - HTTP only"""

    def __init__(self, base_url: str = "http://localhost:11434", request_timeout: float = 120, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url.rstrip('/')
        self.request_timeout = request_timeout
        self.model: Optional[str] = None

    @staticmethod
    def model_name_for(model_path: Path) -> str:
        stem = re.sub(r"[^a-z0-9._-]+", "-", Path(model_path).stem.lower())
        return f"c9ai-{stem}"

    def check_available(self) -> bool:
        """Check if the Ollama server answers (HTTP only)"""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=5)
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False

    def _installed_models(self):
        response = requests.get(f"{self.base_url}/api/tags", timeout=5)
        response.raise_for_status()
        data = response.json()
        models = data.get("models", []) if isinstance(data, dict) else []
        return [m.get("name", "").split(":")[0] for m in models if isinstance(m, dict)]

    def load(self, model_path: Path) -> None:
        """Create an Ollama model from the local file unless it already exists"""
        name = self.model_name_for(model_path)
        try:
            if name not in self._installed_models():
                logging.info(f"Registering {model_path} with Ollama as {name}")
                response = requests.post(
                    f"{self.base_url}/api/create",
                    json={"model": name, "modelfile": f"FROM {Path(model_path).resolve()}", "stream": False},
                    timeout=self.request_timeout,
                )
                response.raise_for_status()
        except requests.exceptions.ConnectionError:
            raise RuntimeError(f"Cannot connect to Ollama at {self.base_url}. Is Ollama running?")
        except (requests.exceptions.RequestException, ValueError) as e:
            raise RuntimeError(f"Ollama model registration failed: {e}")

        self.model = name
        logging.info(f"Ollama model ready: {name}")

    def complete(
        self,
        prompt: str,
        max_tokens: int = 150,
        temperature: float = 0.7,
        stop: Optional[Sequence[str]] = None,
        repeat_penalty: float = 1.1,
    ) -> str:
        """Generate a completion using Ollama /api/generate (HTTP only)"""
        if self.model is None:
            raise RuntimeError("No model loaded")

        payload = {
            "model": self.model,
            "prompt": prompt,
            "raw": True,
            "stream": False,
            "options": {
                "num_predict": max_tokens,
                "temperature": temperature,
                "repeat_penalty": repeat_penalty,
                "stop": list(stop or []),
            },
        }

        try:
            response = requests.post(
                f"{self.base_url}/api/generate",
                json=payload,
                timeout=self.request_timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.ConnectionError:
            raise RuntimeError(f"Cannot connect to Ollama at {self.base_url}. Is Ollama running?")
        except (requests.exceptions.RequestException, ValueError) as e:
            logging.error(f"Ollama API error: {e}")
            raise RuntimeError(f"Ollama API call failed: {e}")

        if not isinstance(data, dict):
            raise RuntimeError(f"Unexpected Ollama response: {str(data)[:100]}")
        return data.get("response", "")
