"""
API endpoints package.

Contains FastAPI routers for all service endpoints:
- /v1/traces:mask - Trace entry masking
- /metrics - Prometheus metrics
- /healthz - Liveness check
"""
from .healthz import router as healthz_router
from .metrics import router as metrics_router
from .traces import router as traces_router

__all__ = ["healthz_router", "metrics_router", "traces_router"]
