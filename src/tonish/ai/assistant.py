"""AI assist actions on tasks and notebooks."""

from typing import Any

from tonish.ai import toon
from tonish.ai.client import OllamaClient
from tonish.logging import get_logger

logger = get_logger(__name__)


class AssistantService:
    """Turns a task or notebook into a prompt, asks the model, parses the reply."""

    def __init__(self, client: OllamaClient) -> None:
        self._client = client

    async def _ask(self, action: str, toon_text: str, request: str) -> dict[str, Any]:
        prompt = toon.build_prompt(action, toon_text, {"request": request})
        reply = await self._client.generate(prompt)
        result = toon.parse_ai_response(reply)
        logger.info("ai_action_completed", action=action, keys=sorted(result))
        return result

    async def enhance_task(self, task: dict[str, Any]) -> dict[str, Any]:
        enhanced = await self._ask(
            toon.ENHANCE_TASK,
            toon.task_to_toon(task),
            "Analyze this task and suggest improvements for better productivity",
        )
        return {"enhanced": enhanced, "original": task}

    async def breakdown_task(self, task: dict[str, Any]) -> dict[str, Any]:
        return await self._ask(
            toon.SUGGEST_BREAKDOWN,
            toon.task_to_toon(task),
            "Break down this task into smaller, actionable subtasks",
        )

    async def analyze_notebook(self, notebook: dict[str, Any]) -> dict[str, Any]:
        return await self._ask(
            toon.ANALYZE_NOTEBOOK,
            toon.notebook_to_toon(notebook),
            "Analyze this notebook and provide insights, topics, and suggestions",
        )

    async def generate_page_ideas(self, notebook: dict[str, Any]) -> dict[str, Any]:
        return await self._ask(
            toon.GENERATE_PAGE_IDEAS,
            toon.notebook_to_toon(notebook),
            "Based on the existing pages, suggest new page ideas that would complement this notebook",
        )
