"""
Route Handlers

Maps HTTP method + path onto the four store operations and translates
storage errors into response statuses:

    GET    <prefix><key>   -> 200 value    | 404 not found
    PUT    <prefix><key>   -> 202          | 400 bad body | 413 too large | 500 encode failure
    DELETE <prefix><key>   -> 200          | 404 not found
    GET    <prefix>        -> 200 key list

The routes are mounted under the configured API path by create_app.
"""

import logging
from http import HTTPStatus
from typing import List

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.routing import Match

from ..service.facade import KVServiceInterface
from ..storage.errors import DecodeError, EncodeError, MalformedInputError, NotFoundError
from .middleware import error_response

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> KVServiceInterface:
    return request.app.state.service


@router.get("/")
def list_keys(service: KVServiceInterface = Depends(get_service)) -> JSONResponse:
    return JSONResponse(service.list_keys())


@router.get("/{key}")
def get_value(key: str, service: KVServiceInterface = Depends(get_service)) -> JSONResponse:
    return JSONResponse(service.get(key))


@router.put("/{key}", status_code=HTTPStatus.ACCEPTED)
async def put_value(key: str, request: Request, service: KVServiceInterface = Depends(get_service)) -> Response:
    """Store the raw body; JSON bodies are kept structured, others as strings."""
    body = await request.body()

    # Content-Length is checked in middleware; this covers chunked bodies
    max_size = request.app.state.settings.MAX_BODY_SIZE
    if len(body) > max_size:
        return error_response(HTTPStatus.REQUEST_ENTITY_TOO_LARGE, "request body too large")

    await run_in_threadpool(service.put, key, body)
    return Response(status_code=HTTPStatus.ACCEPTED)


@router.delete("/{key}")
def delete_value(key: str, service: KVServiceInterface = Depends(get_service)) -> Response:
    service.delete(key)
    return Response(status_code=HTTPStatus.OK)


# ============================================================================
# Error translation
# ============================================================================

def allowed_methods(request: Request) -> List[str]:
    """Methods of every route whose path matches the request."""
    methods = set()
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match != Match.NONE:
            methods.update(getattr(route, "methods", None) or ())
    return sorted(methods)


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return error_response(HTTPStatus.NOT_FOUND, "not found")


async def malformed_input_handler(request: Request, exc: MalformedInputError) -> JSONResponse:
    return error_response(HTTPStatus.BAD_REQUEST, str(exc))


async def encode_error_handler(request: Request, exc: EncodeError) -> JSONResponse:
    logger.error(f"Unable to store value for {request.url.path}: {exc}")
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "unable to store value")


async def decode_error_handler(request: Request, exc: DecodeError) -> JSONResponse:
    logger.error(f"Stored value for {request.url.path} could not be decoded: {exc}")
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "unable to read value")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path, wrong method) in the store's error format."""
    headers = dict(exc.headers or {})
    if exc.status_code == HTTPStatus.METHOD_NOT_ALLOWED:
        headers["Allow"] = ", ".join(allowed_methods(request))
    return error_response(exc.status_code, HTTPStatus(exc.status_code).phrase.lower(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(MalformedInputError, malformed_input_handler)
    app.add_exception_handler(EncodeError, encode_error_handler)
    app.add_exception_handler(DecodeError, decode_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
