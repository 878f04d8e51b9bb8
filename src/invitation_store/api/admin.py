"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from invitation_store.domain.storage import StorageTier, StorageUsage

if TYPE_CHECKING:
    from invitation_store.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/storage", dependencies=[Depends(require_admin)])
async def storage_usage(request: Request) -> dict[str, object]:
    """Return usage and critical flags for both tiers."""
    container: AppContainer = request.app.state.container
    monitor = container.stores.monitor
    return {
        tier.value: {
            **_serialize_usage(monitor.usage(tier)),
            "critical": monitor.is_critical(tier),
        }
        for tier in StorageTier
    }


@router.post("/cleanup", dependencies=[Depends(require_admin)])
async def cleanup(
    request: Request, days: float | None = None, forced: bool = False
) -> dict[str, object]:
    """Evict durable invitations older than ``days`` (default from settings)."""
    container: AppContainer = request.app.state.container
    threshold = container.settings.retention_days if days is None else days
    result = container.stores.durable.sweep(threshold, forced=forced)
    return {
        "cleaned_count": result.cleaned_count,
        "remaining_count": result.remaining_count,
        "evicted_ids": list(result.evicted_ids),
        "usage": _serialize_usage(result.usage),
    }


def _serialize_usage(usage: StorageUsage) -> dict[str, object]:
    return {
        "used_bytes": usage.used_bytes,
        "total_bytes": usage.total_bytes,
        "percentage": round(usage.percentage, 2),
    }
