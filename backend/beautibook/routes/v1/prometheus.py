"""
Prometheus metrics endpoint for monitoring infrastructure.

Exposes service timings and hold lifecycle counters. Public, like any
Prometheus scrape target; nothing here identifies customers.
"""

from fastapi import APIRouter, Response

from ...monitoring.prometheus_metrics import prometheus_metrics

router = APIRouter()


@router.get("/prometheus", include_in_schema=False, response_class=Response, response_model=None)
async def get_prometheus_metrics() -> Response:
    """Expose Prometheus metrics for scraping."""
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
