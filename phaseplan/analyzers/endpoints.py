"""API contract inference for generated route handler files."""

from __future__ import annotations

import re
from typing import List

from ..models import APIContract
from .files import HTTP_METHODS

_ENDPOINT_FROM_PATH = re.compile(r"/api/(.+?)(?:/route)?\.ts")
_RESPONSE_SCHEMA = re.compile(r"NextResponse\.json\s*\(\s*\{[^}]*\}\s*(?:as\s+(\w+))?")
_AUTH_MARKERS = ("getServerSession", "auth()", "requireAuth", "Authorization")


def endpoint_for_path(path: str) -> str:
    """Map ``app/api/users/route.ts`` to ``/api/users``; other paths pass through."""
    match = _ENDPOINT_FROM_PATH.search(path)
    return f"/api/{match.group(1)}" if match else path


def extract_api_contracts(path: str, content: str) -> List[APIContract]:
    """Return one contract per exported HTTP method handler in the file."""
    endpoint = endpoint_for_path(path)
    authenticated = any(marker in content for marker in _AUTH_MARKERS)
    response = _RESPONSE_SCHEMA.search(content)
    response_schema = response.group(1) if response else None

    contracts: List[APIContract] = []
    for method in HTTP_METHODS:
        if (
            f"export async function {method}" not in content
            and f"export function {method}" not in content
        ):
            continue
        request = re.search(rf"{method}[^{{]*\{{[^}}]*body[^:]*:\s*(\w+)", content)
        contracts.append(
            APIContract(
                endpoint=endpoint,
                method=method,
                authentication=authenticated,
                request_schema=request.group(1) if request else None,
                response_schema=response_schema,
                source_file=path,
            )
        )
    return contracts


__all__ = ["endpoint_for_path", "extract_api_contracts"]
