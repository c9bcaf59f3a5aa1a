"""Workspace API routes."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teamspace.api.deps import AuthContext, get_db, require_auth
from teamspace.schemas.common import Envelope
from teamspace.schemas.workspace import WorkspaceCreate, WorkspaceRead, WorkspaceUpdate
from teamspace.services import workspaces as workspace_service

router = APIRouter()


@router.get("", response_model=Envelope[list[WorkspaceRead]])
def api_list_workspaces(
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[list[WorkspaceRead]]:
    """Every workspace the caller belongs to, with their role in each."""
    views = workspace_service.list_workspaces(db, ctx.user.id)
    return Envelope(data=[WorkspaceRead.model_validate(v) for v in views])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Envelope[WorkspaceRead])
def api_create_workspace(
    data: WorkspaceCreate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[WorkspaceRead]:
    view = workspace_service.create_workspace(db, ctx.user, data.name)
    return Envelope(data=WorkspaceRead.model_validate(view), message="Workspace created")


# Admin checks below are made against the path's workspace, not the token's.
@router.put("/{workspace_id}", response_model=Envelope[WorkspaceRead])
def api_update_workspace(
    workspace_id: UUID,
    data: WorkspaceUpdate,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[WorkspaceRead]:
    view = workspace_service.update_workspace(db, ctx.user.id, workspace_id, data.name)
    return Envelope(data=WorkspaceRead.model_validate(view), message="Workspace updated")


@router.delete("/{workspace_id}", response_model=Envelope[None])
def api_delete_workspace(
    workspace_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[None]:
    workspace_service.delete_workspace(db, ctx.user.id, workspace_id)
    return Envelope(message="Workspace deleted")


@router.delete("/{workspace_id}/users/{user_id}", response_model=Envelope[None])
def api_remove_member(
    workspace_id: UUID,
    user_id: UUID,
    db: Session = Depends(get_db),
    ctx: AuthContext = Depends(require_auth),
) -> Envelope[None]:
    """Remove a member from the workspace."""
    workspace_service.remove_member(db, workspace_id, ctx.user.id, user_id)
    return Envelope(message="User removed from workspace")
