"""
Per-route request instrumentation.

InstrumentedRoute is installed as the APIRouter route_class, so the timing
wrapper only runs once Starlette has matched a route: unmatched paths (404)
and unmatched methods (405) never reach it and record no samples. Samples are
labelled with the route's path template, not the resolved path. The timer
stops when the endpoint has produced its Response; sending the body to the
client happens afterwards and is not part of the recorded duration.
"""
from __future__ import annotations

import time
from typing import Callable, Coroutine

from fastapi import Request, Response
from fastapi.routing import APIRoute

from src.api.metrics import ApiMetrics


class InstrumentedRoute(APIRoute):

    def get_route_handler(self) -> Callable[[Request], Coroutine[None, None, Response]]:
        handler = super().get_route_handler()
        path_template = self.path_format

        async def instrumented_handler(request: Request) -> Response:
            metrics: ApiMetrics = request.app.state.metrics
            t_start = time.perf_counter()
            try:
                return await handler(request)
            finally:
                metrics.observe(path_template, time.perf_counter() - t_start)

        return instrumented_handler
