"""Token-oriented text rendering of tasks and notebooks for model prompts.

The model sees a compact, brace-delimited object description instead of raw
JSON, followed by the exact JSON shape it must answer with. Replies are
parsed best-effort: markdown code fences are stripped, then the remainder
must be a JSON object.
"""

import json
from collections.abc import Mapping
from typing import Any

from tonish.exceptions import AIResponseParseError

CONTENT_PREVIEW_CHARS = 200

ENHANCE_TASK = "enhance_task"
SUGGEST_BREAKDOWN = "suggest_breakdown"
ANALYZE_NOTEBOOK = "analyze_notebook"
GENERATE_PAGE_IDEAS = "generate_page_ideas"

RESPONSE_FORMATS: dict[str, str] = {
    ENHANCE_TASK: '{"title": "...", "description": "...", "priority": "...", "quadrant": "...", "tags": [...], "suggestions": "..."}',
    SUGGEST_BREAKDOWN: '{"subtasks": [{"title": "...", "description": "...", "priority": "..."}], "reasoning": "..."}',
    ANALYZE_NOTEBOOK: '{"summary": "...", "topics": [...], "suggestions": [...], "key_insights": [...]}',
    GENERATE_PAGE_IDEAS: '{"ideas": [{"title": "...", "description": "...", "relevance": "..."}]}',
}
DEFAULT_RESPONSE_FORMAT = '{"result": "...", "message": "..."}'


def task_to_toon(task: Mapping[str, Any]) -> str:
    """Render a task dict (as produced by Task.to_dict or a request body)."""
    lines = [
        "TASK_OBJECT {",
        f'  title: "{task.get("title") or ""}"',
        f'  description: "{task.get("description") or ""}"',
        f"  priority: {task.get('priority') or ''}",
        f"  status: {task.get('status') or ''}",
        f"  quadrant: {task.get('quadrant') or ''}",
    ]
    due_date = task.get("due_date")
    if due_date:
        lines.append(f'  due_date: "{str(due_date)[:10]}"')
    if task.get("tags"):
        lines.append(f"  tags: {task['tags']}")
    lines.append("}")
    return "\n".join(lines)


def notebook_to_toon(notebook: Mapping[str, Any]) -> str:
    """Render a notebook dict with a short content preview of each page."""
    pages = notebook.get("pages") or []
    lines = [
        "NOTEBOOK_OBJECT {",
        f'  name: "{notebook.get("name") or ""}"',
        f"  tags: {notebook.get('tags') or ''}",
        f"  is_pinned: {'true' if notebook.get('is_pinned') else 'false'}",
        f"  page_count: {len(pages)}",
    ]
    if pages:
        lines.append("  pages: [")
        for i, page in enumerate(pages, start=1):
            preview = page.get("content") or ""
            if len(preview) > CONTENT_PREVIEW_CHARS:
                preview = preview[:CONTENT_PREVIEW_CHARS] + "..."
            lines.append(f"    PAGE_{i} {{")
            lines.append(f'      title: "{page.get("title") or ""}"')
            lines.append(f'      content_preview: "{preview}"')
            lines.append("    }")
        lines.append("  ]")
    lines.append("}")
    return "\n".join(lines)


def build_prompt(action: str, toon: str, context: Mapping[str, Any] | None = None) -> str:
    """Assemble the full prompt for one assistant action."""
    parts = [
        "You are Tonish AI Assistant, specialized in task management and productivity.\n",
        f"Action requested: {action}\n\n",
        "Input data in TOON format:\n",
        toon,
        "\n\n",
    ]
    if context:
        parts.append("Additional context:\n")
        for key, value in context.items():
            parts.append(f"  {key}: {value}\n")
        parts.append("\n")
    parts.append("Please respond with valid JSON only. No markdown, no explanation.\n")
    parts.append("Response format: ")
    parts.append(RESPONSE_FORMATS.get(action, DEFAULT_RESPONSE_FORMAT))
    return "".join(parts)


def parse_ai_response(text: str) -> dict[str, Any]:
    """Parse a model reply into a dict, tolerating a markdown code fence."""
    cleaned = text.strip()
    for prefix in ("```json", "```"):
        if cleaned.startswith(prefix):
            cleaned = cleaned[len(prefix):]
            break
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    cleaned = cleaned.strip()

    try:
        result = json.loads(cleaned)
    except ValueError as e:
        raise AIResponseParseError(text) from e
    if not isinstance(result, dict):
        raise AIResponseParseError(text)
    return result
