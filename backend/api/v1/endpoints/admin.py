"""api/v1/endpoints/admin.py — Admin dashboard, user management, and data tools.

Routes (all ADMIN):
    GET    /admin/stats                    System-wide counts
    GET    /admin/users                    Paginated user list; optional search, user_type
    POST   /admin/users                    Create a user
    PUT    /admin/users/{id}               Edit a user
    DELETE /admin/users/{id}               Delete a user and everything attached to it
    POST   /admin/backups                  Trigger a named backup
    POST   /admin/backups/{id}/restore     Restore a backup
"""

from __future__ import annotations

import logging
import math

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_session_store, get_upstream, require_roles
from client.api_client import ScoutingApiClient
from client.tokens import SessionUser
from db.session_store import SessionStore
from schemas.auth import Role
from schemas.shared import MessageResponse, PaginationMeta
from schemas.user import (
    BackupRequest,
    CascadeDeleteResponse,
    SystemStats,
    User,
    UserForm,
    UserListResponse,
)
from services.cascade import delete_user_cascade

logger = logging.getLogger(__name__)

router = APIRouter()

_admin = require_roles("ADMIN")


@router.get("/stats", response_model=SystemStats, summary="System statistics")
def stats(
    user: SessionUser = Depends(_admin),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return client.get_system_stats()


@router.get("/users", response_model=UserListResponse, summary="List users")
def list_users(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    page_size: int = Query(10, ge=1, le=100, description="Results per page"),
    search: str | None = Query(None, description="Partial email match"),
    user_type: Role | None = Query(None, description="TALENT, SCOUT or ADMIN"),
    user: SessionUser = Depends(_admin),
    client: ScoutingApiClient = Depends(get_upstream),
):
    users = client.list_users()
    if search:
        term = search.lower()
        users = [u for u in users if term in u.email.lower()]
    if user_type:
        users = [u for u in users if u.user_type == user_type]
    users.sort(key=lambda u: u.id)

    total = len(users)
    offset = (page - 1) * page_size
    return UserListResponse(
        data=users[offset:offset + page_size],
        meta=PaginationMeta(
            page=page,
            page_size=page_size,
            total=total,
            total_pages=math.ceil(total / page_size) if total else 0,
        ),
    )


@router.post("/users", response_model=User, status_code=201, summary="Create user")
def create_user(
    form: UserForm,
    user: SessionUser = Depends(_admin),
    client: ScoutingApiClient = Depends(get_upstream),
):
    created = client.create_user(form.to_upstream())
    logger.info("user created by admin", extra={"user_id": created.id, "admin_id": user.id})
    return created


@router.put("/users/{user_id}", response_model=User, summary="Edit user")
def update_user(
    user_id: int,
    form: UserForm,
    user: SessionUser = Depends(_admin),
    client: ScoutingApiClient = Depends(get_upstream),
):
    return client.update_user(user_id, form.to_upstream())


@router.delete("/users/{user_id}", response_model=CascadeDeleteResponse, summary="Delete user")
def delete_user(
    user_id: int,
    user: SessionUser = Depends(_admin),
    client: ScoutingApiClient = Depends(get_upstream),
    store: SessionStore = Depends(get_session_store),
):
    report = delete_user_cascade(client, user_id)
    dropped = store.delete_for_user(user_id)
    logger.info(
        "user deleted by admin",
        extra={"user_id": user_id, "admin_id": user.id, "sessions_dropped": dropped},
    )
    return CascadeDeleteResponse(
        user_id=report.user_id,
        scout_deleted=report.scout_deleted,
        talent_deleted=report.talent_deleted,
        match_history_deleted=report.match_history_deleted,
        scouting_reports_deleted=report.scouting_reports_deleted,
        warnings=report.warnings,
    )


@router.post("/backups", response_model=MessageResponse, status_code=202, summary="Create backup")
def create_backup(
    form: BackupRequest,
    user: SessionUser = Depends(_admin),
    client: ScoutingApiClient = Depends(get_upstream),
):
    client.create_backup(form.name)
    logger.info("backup requested", extra={"backup_name": form.name, "admin_id": user.id})
    return MessageResponse(message=f"Backup '{form.name}' started")


@router.post("/backups/{backup_id}/restore", response_model=MessageResponse, status_code=202,
             summary="Restore backup")
def restore_backup(
    backup_id: int,
    user: SessionUser = Depends(_admin),
    client: ScoutingApiClient = Depends(get_upstream),
):
    client.restore_backup(backup_id)
    logger.warning("backup restore requested", extra={"backup_id": backup_id, "admin_id": user.id})
    return MessageResponse(message=f"Restore of backup {backup_id} started")
