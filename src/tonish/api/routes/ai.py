"""AI assist endpoints backed by the local Ollama model."""

from fastapi import APIRouter, Request

from tonish.ai.assistant import AssistantService
from tonish.ai.client import OllamaClient
from tonish.api.schemas import TaskUpdate
from tonish.exceptions import NotFoundError

router = APIRouter()


def _assistant(request: Request) -> AssistantService:
    return request.app.state.assistant


@router.post("/tasks/enhance")
async def enhance_task(body: TaskUpdate, request: Request) -> dict:
    return await _assistant(request).enhance_task(body.model_dump(mode="json", exclude_unset=True))


@router.post("/tasks/breakdown")
async def breakdown_task(body: TaskUpdate, request: Request) -> dict:
    return await _assistant(request).breakdown_task(body.model_dump(mode="json", exclude_unset=True))


async def _notebook(request: Request, notebook_id: int) -> dict:
    notebook = await request.app.state.notebook_store.get(notebook_id)
    if notebook is None:
        raise NotFoundError("Notebook", notebook_id)
    return notebook.to_dict()


@router.post("/notebooks/{notebook_id}/analyze")
async def analyze_notebook(notebook_id: int, request: Request) -> dict:
    notebook = await _notebook(request, notebook_id)
    return await _assistant(request).analyze_notebook(notebook)


@router.post("/notebooks/{notebook_id}/page-ideas")
async def page_ideas(notebook_id: int, request: Request) -> dict:
    notebook = await _notebook(request, notebook_id)
    return await _assistant(request).generate_page_ideas(notebook)


@router.get("/health")
async def health(request: Request) -> dict:
    client: OllamaClient = request.app.state.ai_client
    await client.health_check()
    return {"status": "healthy", "model": client.model, "url": client.base_url}
