"""AI assist -- prompt rendering and the Ollama client."""

from tonish.ai.assistant import AssistantService
from tonish.ai.client import OllamaClient
from tonish.ai.toon import build_prompt, notebook_to_toon, parse_ai_response, task_to_toon

__all__ = [
    "AssistantService",
    "OllamaClient",
    "build_prompt",
    "notebook_to_toon",
    "parse_ai_response",
    "task_to_toon",
]
