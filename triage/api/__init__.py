"""HTTP API for maintenance triage.

Each feature has its own router module, assembled here into a single
FastAPI app.

Endpoints:
    GET  /health             - Health check
    POST /priority-zones     - Ranked priority zones
    POST /nearest-waterways  - Nearest waterway per issue
    POST /work-queue         - Filtered, sorted task queue
    POST /issue-stats        - Issue counts
"""

from fastapi import FastAPI

from triage.api.health_router import router as health_router
from triage.api.triage_router import router as triage_router

app = FastAPI(title="Maintenance Triage API")

app.include_router(health_router)
app.include_router(triage_router)
