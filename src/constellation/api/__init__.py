"""
FastAPI application for the constellation dashboard.

Read-only JSON API over the agent workspace, consumed by the dashboard UI.

API Endpoints:
- GET /api/projects - Registered projects with derived progress
- GET /api/project/{slug}/state|progress|tasks - Project documents
- GET /api/project/{slug}/files/{path} - Allow-listed project files
- GET /api/overview - Counts, attention flags, activity, task buckets
- GET /api/agents - Per-agent feed, inbox and process status
- GET /api/ideas - Ideas with project re-routing applied
- GET /api/departments[/{name}|/feed] - Department views
- GET /api/health, /api/metrics - Process health and usage figures
- GET /api/changelog, /api/blocked - Pooled feed views

Usage:
    # Run the server
    uvicorn constellation.api.app:app --port 3400

    # Or from Python
    from constellation.api.app import app
"""

from constellation.api.app import app

__all__ = ["app"]
