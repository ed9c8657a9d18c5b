"""Roller Lambda handler for chat roll commands."""

from typing import Any, TypeVar

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.event_handler import APIGatewayRestResolver, CORSConfig, Response
from aws_lambda_powertools.event_handler.exceptions import (
    BadRequestError,
    UnauthorizedError,
)
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import BaseModel, ValidationError

from roller.chat import RollBot
from roller.models import ChatMessageRequest, RollRequest
from roller.service import HELP_MESSAGE, RollService
from shared.config import get_config
from shared.utils import extract_user_id

logger = Logger()
tracer = Tracer()
metrics = Metrics(namespace="Rollbot")
cors_config = CORSConfig(allow_origin="*", allow_headers=["Content-Type", "X-User-Id"], max_age=300)
app = APIGatewayRestResolver(cors=cors_config)

RequestT = TypeVar("RequestT", bound=BaseModel)

# Initialize bot lazily
_bot: RollBot | None = None


def get_bot() -> RollBot:
    """Get or create the roll bot instance."""
    global _bot
    if _bot is None:
        config = get_config()
        service = RollService(help_trigger=config.help_trigger)
        _bot = RollBot(service, prefix=config.command_prefix)
    return _bot


def reset_service() -> None:
    """Reset the bot instance (for testing)."""
    global _bot
    _bot = None


def get_user_id() -> str:
    """Extract and validate user ID from headers.

    Returns:
        The user ID from the X-User-Id header

    Raises:
        UnauthorizedError: If header is missing or invalid
    """
    user_id = extract_user_id(app.current_event.headers)
    if not user_id:
        raise UnauthorizedError("Missing or invalid X-User-Id header")
    return user_id


def parse_request(model: type[RequestT]) -> RequestT:
    """Decode the JSON request body into a request model.

    Args:
        model: Pydantic model describing the expected body

    Returns:
        Validated request model

    Raises:
        BadRequestError: If the body is not a JSON object or fails validation
    """
    try:
        body = app.current_event.json_body or {}
    except ValueError:
        raise BadRequestError("Request body must be valid JSON") from None

    if not isinstance(body, dict):
        raise BadRequestError("Request body must be a JSON object")

    try:
        return model(**body)
    except ValidationError as e:
        error_msg = e.errors()[0].get("msg", "Invalid request")
        raise BadRequestError(error_msg) from None


@app.post("/roll")
@tracer.capture_method
def post_roll() -> dict[str, Any]:
    """Evaluate a formula directly, without the chat prefix.

    Returns:
        200 response with the report text
    """
    request = parse_request(RollRequest)

    result, report = get_bot().service.answer(request.formula)
    if report is not None:
        metrics.add_metric(name="RollsEvaluated", unit=MetricUnit.Count, value=1)

    return {"formula": request.formula, "result": result}


@app.post("/messages")
@tracer.capture_method
def post_message() -> Response:
    """Handle an inbound chat message.

    Returns:
        200 response with the reply for roll commands,
        204 for ordinary chat text
    """
    user_id = get_user_id()

    request = parse_request(ChatMessageRequest)

    reply = get_bot().handle_message(user_id, request.channel, request.text)
    if reply is None:
        return Response(
            status_code=204,
            content_type="application/json",
            body=None,
        )

    metrics.add_metric(name="CommandsHandled", unit=MetricUnit.Count, value=1)
    logger.info("Roll command answered", extra={"channel": request.channel, "user_id": user_id})

    return Response(
        status_code=200,
        content_type="application/json",
        body={"channel": request.channel, "reply": reply},
    )


@app.get("/help")
@tracer.capture_method
def get_help() -> dict[str, Any]:
    """Return the usage message.

    Returns:
        200 response with help text
    """
    return {"help": HELP_MESSAGE}


@logger.inject_lambda_context
@tracer.capture_lambda_handler
@metrics.log_metrics
def lambda_handler(event: dict, context: LambdaContext) -> dict:
    """Main Lambda entry point.

    Args:
        event: API Gateway event
        context: Lambda context

    Returns:
        API Gateway response
    """
    return app.resolve(event, context)
