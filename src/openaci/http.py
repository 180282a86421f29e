"""
HTTP Front-End

Serves an intent router over HTTP: the whole request body is the utterance
and the response content type follows the resolved response format.
"""

from __future__ import annotations

import base64

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from openaci import __version__
from openaci.intent.router import IntentResponse, IntentRouter

logger = structlog.get_logger(__name__)

METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def render_response(response: IntentResponse) -> Response:
    """Map an intent response onto an HTTP response."""
    response_format = response.response_format

    if response_format.is_binary:
        body: bytes | str = base64.b64decode(response.output)
    else:
        body = response.output

    return Response(
        content=body,
        media_type=response_format.content_type,
        headers={"X-Response-Format": response_format.value},
    )


def create_app(router: IntentRouter) -> FastAPI:
    """Build a FastAPI app that feeds every request body to the router."""
    app = FastAPI(title="openaci", version=__version__)

    @app.api_route("/{path:path}", methods=METHODS)
    async def handle_utterance(request: Request) -> Response:
        body = await request.body()
        logger.debug("request_received", path=request.url.path, body_length=len(body))

        try:
            utterance = body.decode("utf-8").strip()
            response = await router.handle(utterance)
            rendered = render_response(response)
        except Exception:
            logger.error("request_failed", path=request.url.path, exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error"},
            )

        logger.debug(
            "request_handled",
            response_format=response.response_format.value,
            output_length=len(response.output),
        )
        return rendered

    return app


class HttpIntentRouter(IntentRouter):
    """
    Intent router with an attached HTTP listener.

    Usage:
        router = HttpIntentRouter(model="gpt-4o-mini")
        router.register("Check the weather", CheckWeather, check_weather)
        router.listen(port=8080)
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._app: FastAPI | None = None

    @property
    def app(self) -> FastAPI:
        """The ASGI application (built on first access)."""
        if self._app is None:
            self._app = create_app(self)
        return self._app

    def listen(self, port: int = 8080, host: str = "0.0.0.0") -> None:
        """Serve the app with uvicorn until interrupted."""
        import uvicorn

        logger.info("server_starting", host=host, port=port, intents=sorted(self.intents))
        uvicorn.run(self.app, host=host, port=port, log_config=None)
