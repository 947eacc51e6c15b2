"""Stateless JSON-RPC endpoint serving the MCP resources and prompts over HTTP.

Every POST builds its own :class:`ResourceRegistry` and :class:`PromptRegistry`,
answers the request and drops them, so concurrent requests share nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any, Dict, Optional

from mcp.shared.version import SUPPORTED_PROTOCOL_VERSIONS
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    LATEST_PROTOCOL_VERSION,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from config import Settings
from prompts import PromptArgumentError, PromptRegistry
from resources import ResourceNotFoundError, ResourceRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "personal-mcp-server"
SERVER_VERSION = "1.0.0"

# Fixed code for verbs the stateless endpoint refuses (GET streams, DELETE sessions).
METHOD_NOT_ALLOWED = -32000


@dataclass
class McpRequestError(Exception):
    message: str
    code: int = INVALID_PARAMS

    def __str__(self) -> str:  # pragma: no cover - logging helper
        return f"[{self.code}] {self.message}"


def error_envelope(code: int, message: str, request_id: Any = None) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": request_id}


def result_envelope(result: Dict[str, Any], request_id: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


class RequestDispatcher:
    """Routes the JSON-RPC messages of one HTTP request to the registries."""

    def __init__(self, settings: Settings) -> None:
        self.resources = ResourceRegistry(settings)
        self.prompts = PromptRegistry(settings)
        self._methods = {
            "initialize": self._initialize,
            "ping": self._ping,
            "resources/list": self._list_resources,
            "resources/templates/list": self._list_templates,
            "resources/read": self._read_resource,
            "prompts/list": self._list_prompts,
            "prompts/get": self._get_prompt,
        }

    def dispatch(self, message: Any) -> Optional[Dict[str, Any]]:
        """Handle one message; notifications return ``None``.

        Protocol errors become error envelopes. Anything else propagates.
        """

        if (
            not isinstance(message, dict)
            or message.get("jsonrpc") != "2.0"
            or not isinstance(message.get("method"), str)
        ):
            request_id = message.get("id") if isinstance(message, dict) else None
            return error_envelope(INVALID_REQUEST, "Invalid Request", request_id)

        method = message["method"]
        if "id" not in message:
            logger.debug("notification %s", method)
            return None

        request_id = message["id"]
        params = message.get("params") or {}
        handler = self._methods.get(method)
        if handler is None:
            return error_envelope(METHOD_NOT_FOUND, "Method not found", request_id)
        if not isinstance(params, dict):
            return error_envelope(INVALID_PARAMS, "params must be an object", request_id)

        try:
            result = handler(params)
        except McpRequestError as exc:
            return error_envelope(exc.code, exc.message, request_id)
        logger.debug("%s handled (id=%r)", method, request_id)
        return result_envelope(result, request_id)

    def dispatch_batch(self, payload: Any) -> Any:
        if isinstance(payload, list):
            if not payload:
                return error_envelope(INVALID_REQUEST, "Invalid Request")
            responses = [self.dispatch(message) for message in payload]
            return [response for response in responses if response is not None] or None
        return self.dispatch(payload)

    # ----------------------------- Methods -------------------------------

    def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        requested = params.get("protocolVersion")
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION
        return {
            "protocolVersion": version,
            "capabilities": {"resources": {}, "prompts": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        }

    def _ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def _list_resources(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"resources": self.resources.list_resources()}

    def _list_templates(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"resourceTemplates": self.resources.list_templates()}

    def _read_resource(self, params: Dict[str, Any]) -> Dict[str, Any]:
        uri = params.get("uri")
        if not isinstance(uri, str):
            raise McpRequestError("resources/read requires a 'uri' string")
        try:
            contents = self.resources.read_resource(uri)
        except ResourceNotFoundError:
            raise McpRequestError(f"Resource {uri} not found") from None
        return {"contents": [content.as_payload() for content in contents]}

    def _list_prompts(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"prompts": self.prompts.list_prompts()}

    def _get_prompt(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            raise McpRequestError("prompts/get requires a 'name' string")
        try:
            definition = self.prompts.get_prompt(name)
        except KeyError:
            raise McpRequestError(f"Prompt {name} not found") from None
        try:
            messages = self.prompts.render(name, params.get("arguments"))
        except PromptArgumentError as exc:
            raise McpRequestError(str(exc))
        return {"description": definition.description, "messages": messages}


def create_app(settings: Optional[Settings] = None) -> Starlette:
    cfg = settings or Settings.from_env()

    async def handle_mcp(request: Request) -> Response:
        if request.method != "POST":
            return JSONResponse(error_envelope(METHOD_NOT_ALLOWED, "Method not allowed."), status_code=405)

        try:
            payload = json.loads(await request.body())
        except ValueError:
            return JSONResponse(error_envelope(PARSE_ERROR, "Parse error"), status_code=400)

        try:
            # Fresh registries per request; file reads stay off the event loop.
            dispatcher = RequestDispatcher(cfg)
            body = await run_in_threadpool(dispatcher.dispatch_batch, payload)
        except Exception:
            logger.exception("Error handling MCP request")
            return JSONResponse(error_envelope(INTERNAL_ERROR, "Internal server error"), status_code=500)

        if body is None:
            return Response(status_code=202)
        return JSONResponse(body)

    return Starlette(routes=[Route("/mcp", handle_mcp, methods=["POST", "GET", "DELETE"])])
