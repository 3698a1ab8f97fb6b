"""Error taxonomy for C9 AI

Tier failures in the fallback chain are recovered by the supervisor;
these only reach the user when the last tier gives up.
"""

from typing import Optional


class C9AIError(Exception):
    """Base class for all C9 AI errors"""


# Intent execution

class IntentError(C9AIError):
    pass


class UnknownVerb(IntentError):
    def __init__(self, verb: str):
        super().__init__(f"Unknown intent verb: {verb}")
        self.verb = verb


class UnsupportedTarget(IntentError):
    def __init__(self, target: str, reason: Optional[str] = None):
        super().__init__(reason or f"Unsupported target: {target}")
        self.target = target


class ScriptNotFound(IntentError):
    def __init__(self, target: str):
        super().__init__(f"Script not found: {target}")
        self.target = target


# Inference

class InferenceError(C9AIError):
    pass


class InferenceTimeout(InferenceError):
    def __init__(self, seconds: float):
        super().__init__(f"Inference timed out after {seconds}s")
        self.seconds = seconds


class EmptyResponse(InferenceError):
    def __init__(self):
        super().__init__("Empty response from local model")


class ModelNotInstalled(InferenceError):
    def __init__(self):
        super().__init__("No model files found. Install a model with: c9ai models install phi-3")


# Resolution

class UnrecognizedInput(C9AIError):
    """Raised by the pattern resolver when no rule matches"""

    def __init__(self, prompt: str, suggestion: str):
        super().__init__(f'I\'m not sure what you mean by "{prompt}". {suggestion}')
        self.prompt = prompt
        self.suggestion = suggestion


class ParseFailure(C9AIError):
    """Model output could not be parsed as a tool selection"""


# Subprocess layer

class CommandFailed(C9AIError):
    def __init__(self, exit_code: int, stderr: str = ""):
        message = stderr.strip() if stderr and stderr.strip() else f"Command failed with code {exit_code}"
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


# Tool registry

class ToolRegistryError(C9AIError):
    pass
