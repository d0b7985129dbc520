"""FastAPI application factory."""

import hmac
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from miniapp_gateway.api.admin import router as admin_router
from miniapp_gateway.api.functions import router as functions_router
from miniapp_gateway.api.telegram_models import TelegramUpdate
from miniapp_gateway.app_logging import configure_logging
from miniapp_gateway.containers import AppContainer
from miniapp_gateway.domain.errors import AuthenticationFailure, GatewayError

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "authorization, x-client-info, apikey, content-type"
    ),
}


async def require_webhook_secret(
    request: Request,
    x_telegram_bot_api_secret_token: str | None = Header(default=None),
) -> None:
    """Accept only updates carrying the secret registered with setWebhook."""
    container: AppContainer = request.app.state.container
    expected = container.settings.telegram_webhook_secret
    if (
        not expected
        or not x_telegram_bot_api_secret_token
        or not hmac.compare_digest(
            x_telegram_bot_api_secret_token.encode("utf-8"),
            expected.encode("utf-8"),
        )
    ):
        raise AuthenticationFailure(
            "Недействительный секрет вебхука", reason="invalid_webhook_secret"
        )


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(functions_router)
    app.include_router(admin_router)

    @app.middleware("http")
    async def cors(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Answer preflight requests and add CORS headers to every response."""
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response

    @app.exception_handler(GatewayError)
    async def gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
        """Render gateway errors as the JSON error envelope."""
        logger.warning(
            "Request failed",
            extra={
                "path": request.url.path,
                "status_code": exc.status_code,
                "reason": exc.reason,
            },
        )
        return JSONResponse(exc.to_payload(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed bodies with the error envelope."""
        logger.warning(
            "Malformed request",
            extra={"path": request.url.path, "errors": exc.errors()},
        )
        return JSONResponse(
            {"error": "Некорректный запрос", "reason": "invalid_request"},
            status_code=400,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/telegram/webhook", dependencies=[Depends(require_webhook_secret)])
    async def telegram_webhook(
        update: TelegramUpdate, request: Request
    ) -> dict[str, str]:
        """Handle moderation button presses from the admin chat."""
        state_container: AppContainer = request.app.state.container
        callback = update.callback_query
        if callback is None or not callback.data:
            return {"status": "ok"}
        answer = await state_container.moderation_service.handle_callback(
            callback.from_user.id, callback.data
        )
        await state_container.telegram_client.answer_callback_query(
            callback.id, text=answer
        )
        return {"status": "ok"}

    return app
