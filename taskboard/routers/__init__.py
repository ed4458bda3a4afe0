"""
FastAPI routers grouped by resource (projects with their tasks, users).

Each module exposes an APIRouter included by ``taskboard.app.create_app``.
Routers only translate HTTP to service calls and service errors to status
codes; the rules live in ``taskboard.services``.
"""
