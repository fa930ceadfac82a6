"""Login, registration and the current-user lookup."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from tonish.api.deps import current_user_id
from tonish.api.schemas import LoginRequest, RegisterRequest
from tonish.auth.service import AuthService
from tonish.exceptions import AuthenticationError, NotFoundError

router = APIRouter()


@router.post("/auth/register", status_code=201)
async def register(body: RegisterRequest, request: Request) -> dict:
    service: AuthService = request.app.state.auth_service
    user = await service.register(body.email, body.password, body.name)
    return user.to_dict()


@router.post("/auth/login")
async def login(body: LoginRequest, request: Request) -> JSONResponse:
    service: AuthService = request.app.state.auth_service
    token, user = await service.login(body.email, body.password)
    return JSONResponse(
        content={
            "token": token,
            "user": {"id": user.id, "email": user.email, "name": user.name},
        }
    )


@router.get("/user/me")
async def me(request: Request, user_id: int | None = Depends(current_user_id)) -> dict:
    if user_id is None:
        raise AuthenticationError("Authorization header required")
    user = await request.app.state.user_store.get(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user.to_dict()
