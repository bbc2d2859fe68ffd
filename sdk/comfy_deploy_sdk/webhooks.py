"""Validation helpers for requests delivered by ComfyDeploy to a web application.

Both helpers return a ``(value, error_response)`` pair where exactly one side is
set, so a FastAPI route can forward the error response unchanged:

    @app.post("/comfy-webhook")
    async def comfy_webhook(request: Request):
        data, error = await parse_webhook_data_safe(request)
        if error is not None:
            return error
        ...
"""

import logging
from typing import Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from .run_client.schemas import WebhookRequestBody

logger = logging.getLogger(__name__)

INVALID_REQUEST_STATUS = 500

ModelT = TypeVar("ModelT", bound=BaseModel)


async def parse_webhook_data_safe(
    request: Request,
    headers: Optional[Mapping[str, str]] = None,
) -> Tuple[Optional[WebhookRequestBody], Optional[JSONResponse]]:
    """Validate a webhook delivery against the run status payload shape."""

    return await parse_data_safe(WebhookRequestBody, request, headers)


async def parse_data_safe(
    model: Type[ModelT],
    request: Request,
    headers: Optional[Mapping[str, str]] = None,
) -> Tuple[Optional[ModelT], Optional[JSONResponse]]:
    """
    Validate request data against a model without raising.

    GET requests are validated from their query parameters (all strings);
    any other method is validated from its JSON body.

    Args:
        model: Pydantic model describing the accepted shape
        request: Incoming request
        headers: Headers attached to the error response

    Returns:
        (value, None) on success, otherwise (None, error response). Field-level
        failures produce a mapping of field name to messages; anything else
        produces a generic "Invalid request" message.
    """
    try:
        if request.method == "GET":
            raw = dict(request.query_params)
        else:
            raw = await request.json()
        data = model.model_validate(raw)
    except ValidationError as exc:
        field_errors = _field_errors(exc)
        logger.error(f"Rejected {model.__name__} payload: {field_errors}")
        if field_errors:
            return None, JSONResponse(
                field_errors,
                status_code=INVALID_REQUEST_STATUS,
                headers=dict(headers) if headers else None,
            )
        return None, _invalid_request(headers)
    except ValueError as exc:
        logger.error(f"Could not decode {model.__name__} payload: {exc}")
        return None, _invalid_request(headers)

    return data, None


def _field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Group validation messages by the top-level field they belong to."""

    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        if not error["loc"]:
            continue
        errors.setdefault(str(error["loc"][0]), []).append(error["msg"])
    return errors


def _invalid_request(headers: Optional[Mapping[str, str]]) -> JSONResponse:
    return JSONResponse(
        {"message": "Invalid request"},
        status_code=INVALID_REQUEST_STATUS,
        headers=dict(headers) if headers else None,
    )
