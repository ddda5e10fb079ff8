"""
FastAPI Server for Local Development

Serves the save-response function over real HTTP so the Heart Matrix UI
can be pointed at it locally. Each request is translated into the event
shape the hosting platform delivers and passed to the function handler.

Usage:
    python -m scripts.local_api_server [--port 8888] [--dry-run]

With --dry-run, emails are logged instead of sent.
"""

import argparse
import logging
import os
import sys
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from heart_matrix.config import EmailConfig, get_settings
from heart_matrix.exceptions import ConfigurationMissingError
from heart_matrix.models.submission import OutboundEmail
from lambdas.save_response.handler import SaveResponseHandler, lambda_handler

# Configure logging (after the handler import, which installs JSON logging)
structlog.configure(
    processors=[
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()

FUNCTION_PATH = "/.netlify/functions/save-response"


def log_only_sender(config: EmailConfig, message: OutboundEmail) -> str:
    """Stand-in sender for --dry-run: print the message instead of sending it."""
    log.info(
        "dry_run_email",
        to=message.to,
        subject=message.subject,
        text=message.text,
    )
    return "dry-run"


def build_event(request: Request, body: bytes) -> dict[str, Any]:
    """Translate a FastAPI request into a platform HTTP event."""
    headers = dict(request.headers)
    if request.client and "x-forwarded-for" not in headers:
        headers["x-forwarded-for"] = request.client.host

    return {
        "httpMethod": request.method,
        "headers": headers,
        "body": body.decode("utf-8", errors="replace") if body else None,
        "isBase64Encoded": False,
        "path": request.url.path,
    }


def create_app(dry_run: bool = False) -> FastAPI:
    app = FastAPI(
        title="Heart Matrix save-response (local)",
        description="Local HTTP wrapper around the save-response function",
    )

    @app.api_route(FUNCTION_PATH, methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
    async def save_response(request: Request) -> PlainTextResponse:
        body = await request.body()
        event = build_event(request, body)

        if dry_run:
            try:
                config = get_settings().email_config()
            except ConfigurationMissingError as e:
                log.error("missing_email_config", missing=e.missing)
                return PlainTextResponse("Missing email config", status_code=500)
            result = SaveResponseHandler(config, sender=log_only_sender).handle(event)
        else:
            result = lambda_handler(event, None)

        return PlainTextResponse(result["body"], status_code=result["statusCode"])

    return app


def main() -> int:
    parser = argparse.ArgumentParser(description="Run save-response locally")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8888)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log emails instead of sending them",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stdout)

    os.environ.setdefault("HEART_MATRIX_ENVIRONMENT", "development")
    get_settings.cache_clear()

    import uvicorn

    log.info(
        "starting_local_server",
        url=f"http://{args.host}:{args.port}{FUNCTION_PATH}",
        dry_run=args.dry_run,
    )
    uvicorn.run(create_app(dry_run=args.dry_run), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
