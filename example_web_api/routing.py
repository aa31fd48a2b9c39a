"""
Explicit Route Table

Controllers declare their routes in a RouteTable, one row per
(method, path pattern) -> handler, instead of relying on decorator
registration order. The table is verified before it is turned into a
FastAPI APIRouter, so two rows that could both claim the same request
stop the application from starting rather than silently shadowing one
another.

Overlap rules for a pair of path segments:
- literal / literal: overlap when equal
- literal / int parameter: overlap when the literal is an integer
- literal / any other parameter: always overlap
- parameter / parameter: always overlap

Parameter types are read from the handler's annotations, so
`/pets/create` and `/pets/{pet_id}` with `pet_id: int` can coexist.
Routes are registered most-literal first, which keeps Starlette's
first-match dispatch consistent with the rules above.
"""

import inspect
import logging
import re
import typing
from dataclasses import dataclass, field
from typing import Any, Callable

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from example_web_api.security import require_antiforgery_token

logger = logging.getLogger(__name__)

_PARAM_SEGMENT = re.compile(r"^{(\w+)}$")
_INT_LITERAL = re.compile(r"^[+-]?\d+$")


class AmbiguousRouteError(ValueError):
    """Two routes could match the same request, or share a name."""


@dataclass(frozen=True)
class Route:
    """One row of a route table."""
    method: str
    path: str
    handler: Callable[..., Any]
    name: str
    param_types: dict[str, type] = field(default_factory=dict)
    antiforgery: bool = False

    @property
    def segments(self) -> list[str]:
        return [s for s in self.path.split("/") if s]

    @property
    def specificity(self) -> tuple[int, ...]:
        # 0 for literal segments, 1 for parameters; lower sorts first
        return tuple(1 if _PARAM_SEGMENT.match(s) else 0 for s in self.segments)

    def describe(self) -> str:
        return f"{self.method} {self.path} ({self.name})"


def _path_params(path: str) -> list[str]:
    names = []
    for segment in path.split("/"):
        match = _PARAM_SEGMENT.match(segment)
        if match:
            names.append(match.group(1))
    return names


def _segments_overlap(a: str, a_types: dict[str, type], b: str, b_types: dict[str, type]) -> bool:
    a_param = _PARAM_SEGMENT.match(a)
    b_param = _PARAM_SEGMENT.match(b)

    if not a_param and not b_param:
        return a == b
    if a_param and b_param:
        return True

    param, types, literal = (a_param, a_types, b) if a_param else (b_param, b_types, a)
    if types.get(param.group(1)) is int:
        return bool(_INT_LITERAL.match(literal))
    return True


def routes_overlap(first: Route, second: Route) -> bool:
    """Whether some concrete request could be matched by both routes."""
    if first.method != second.method:
        return False

    first_segments, second_segments = first.segments, second.segments
    if len(first_segments) != len(second_segments):
        return False

    return all(
        _segments_overlap(a, first.param_types, b, second.param_types)
        for a, b in zip(first_segments, second_segments)
    )


class RouteTable:
    """Ordered collection of routes for one controller."""

    def __init__(self, tags: list[str] | None = None):
        self.tags = tags or []
        self._routes: list[Route] = []

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    def add(
        self,
        method: str,
        path: str,
        handler: Callable[..., Any],
        name: str,
        antiforgery: bool = False,
    ) -> Route:
        """
        Register a route.

        Args:
            method: HTTP method, case-insensitive
            path: Path pattern with `{param}` segments
            handler: Endpoint function; must accept every path parameter
            name: Route name used with url_for
            antiforgery: Require a valid anti-forgery token

        Raises:
            ValueError: If the handler does not accept a path parameter
        """
        parameters = inspect.signature(handler).parameters
        hints = typing.get_type_hints(handler)

        param_types = {}
        for param in _path_params(path):
            if param not in parameters:
                raise ValueError(
                    f"Handler {handler.__name__} has no parameter '{param}' for path {path}"
                )
            param_types[param] = hints.get(param, str)

        route = Route(
            method=method.upper(),
            path=path,
            handler=handler,
            name=name,
            param_types=param_types,
            antiforgery=antiforgery,
        )
        self._routes.append(route)
        return route

    def conflicts(self) -> list[tuple[Route, Route]]:
        """Every pair of routes that overlap or share a name."""
        found = []
        for i, first in enumerate(self._routes):
            for second in self._routes[i + 1:]:
                if first.name == second.name or routes_overlap(first, second):
                    found.append((first, second))
        return found

    def verify(self) -> None:
        """
        Raise if any two routes are ambiguous.

        Raises:
            AmbiguousRouteError: Listing every conflicting pair
        """
        conflicts = self.conflicts()
        if conflicts:
            details = "; ".join(f"{a.describe()} vs {b.describe()}" for a, b in conflicts)
            raise AmbiguousRouteError(f"Ambiguous routes: {details}")

    def build_router(self) -> APIRouter:
        """Verify the table and register its routes on a new APIRouter."""
        self.verify()

        router = APIRouter(tags=self.tags)
        for route in sorted(self._routes, key=lambda r: r.specificity):
            router.add_api_route(
                route.path,
                route.handler,
                methods=[route.method],
                name=route.name,
                response_class=HTMLResponse,
                dependencies=[Depends(require_antiforgery_token)] if route.antiforgery else None,
            )

        logger.debug(f"Built router with {len(self._routes)} route(s)")
        return router
