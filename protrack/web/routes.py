"""
HTTP routes: public project status page, AI summaries and cache refresh.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query

from ..ai import SummarizerError
from ..database.exceptions import EntityNotFoundError
from ..models import EntityKind, Project
from ..services import project_progress
from ..utils import format_duration, total_logged_minutes
from .state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


def _public_project(project: Project) -> Dict[str, Any]:
    members = [m.public_copy() for m in project.team_members]
    return project.model_copy(update={"team_members": members}).to_json_dict()


def cache_status(state: AppState) -> Dict[str, Any]:
    """Collection states, loading flags and counters."""
    return {
        "collections": {kind.value: state.cache.state(kind).value for kind in EntityKind},
        "loading": {
            "essential": state.loader.is_loading,
            "projects": state.loader.is_projects_loading,
            "tasks": state.loader.is_tasks_loading,
            "activities": state.loader.is_activities_loading,
        },
        "stats": state.cache.stats.get_summary(),
        "last_error": state.last_error,
    }


# ============================================================================
# Public status page
# ============================================================================

@router.get("/status")
async def project_status_page(token: str = Query(..., min_length=1), state: AppState = Depends(get_app_state)):
    """Read-only view of a shared project, its tasks and its recent activity."""
    await state.loader.wait_secondary()

    project = next((p for p in state.cache.projects if p.share_token == token), None)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found or link is invalid.")

    tasks = state.cache.tasks_for_project(project.id)
    activities = state.cache.activities_for_project(project.id)

    return {
        "project": _public_project(project),
        "progress": project_progress(project, tasks),
        "time_logged": format_duration(total_logged_minutes(activities)),
        "tasks": [t.to_json_dict() for t in tasks],
        "activities": [a.to_json_dict() for a in activities],
    }


# ============================================================================
# AI summary
# ============================================================================

@router.post("/projects/{project_id}/summary")
async def project_summary(project_id: str, state: AppState = Depends(get_app_state)):
    """Generate an AI summary for a project. Results are never cached."""
    try:
        summary = await state.service.generate_project_summary(project_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SummarizerError as e:
        logger.error(f"Summary for {project_id} failed: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to generate summary: {e}")

    return summary.to_json_dict()


# ============================================================================
# Cache refresh
# ============================================================================

@router.post("/refetch")
async def refetch(state: AppState = Depends(get_app_state)):
    """Reload every collection from the spreadsheet."""
    await state.loader.refetch()
    await state.loader.wait_secondary()
    return cache_status(state)
