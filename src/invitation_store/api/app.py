"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from invitation_store.api.admin import router as admin_router
from invitation_store.api.invitation_models import InvitationPayload
from invitation_store.app_logging import configure_logging
from invitation_store.containers import AppContainer
from invitation_store.domain.invitations import new_invitation_id, record_to_wire
from invitation_store.domain.storage import CommitResult, SaveOutcome
from invitation_store.errors import (
    CapacityError,
    FallbackPathError,
    IntegrityError,
    MediaValidationError,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(CapacityError)
    async def capacity_error(_request: Request, exc: CapacityError) -> JSONResponse:
        logger.warning("Rejected durable write: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_507_INSUFFICIENT_STORAGE,
            content={
                "detail": str(exc),
                "percentage": exc.percentage,
                "cleaned_count": exc.cleaned_count,
            },
        )

    @app.exception_handler(IntegrityError)
    @app.exception_handler(FallbackPathError)
    async def write_failure(_request: Request, exc: Exception) -> JSONResponse:
        logger.error("Invitation write failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )

    @app.exception_handler(MediaValidationError)
    async def media_error(_request: Request, exc: MediaValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/invitations")
    async def list_invitations(request: Request) -> dict[str, object]:
        """Return durable invitations and staged drafts."""
        stores = request.app.state.container.stores
        return {
            "durable": [record_to_wire(r) for r in stores.durable.load_all()],
            "drafts": [record_to_wire(r) for r in stores.transient.load_all()],
        }

    @app.get("/invitations/{invitation_id}")
    async def get_invitation(invitation_id: str, request: Request) -> dict[str, object]:
        """Return one invitation, preferring the staged draft."""
        stores = request.app.state.container.stores
        record = stores.transient.get(invitation_id) or stores.durable.get(
            invitation_id
        )
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return record_to_wire(record)

    @app.post("/invitations", status_code=status.HTTP_201_CREATED)
    async def create_invitation(
        payload: InvitationPayload, request: Request
    ) -> dict[str, object]:
        """Stage a new invitation draft under a freshly generated id."""
        stores = request.app.state.container.stores
        record = payload.to_record(new_invitation_id())
        return _outcome_payload(stores.transient.save(record))

    @app.put("/invitations/{invitation_id}")
    async def save_invitation(
        invitation_id: str, payload: InvitationPayload, request: Request
    ) -> dict[str, object]:
        """Stage a full replacement of an invitation draft."""
        stores = request.app.state.container.stores
        record = payload.to_record(invitation_id)
        return _outcome_payload(stores.transient.save(record))

    @app.post("/invitations/commit")
    async def commit_invitations(request: Request) -> dict[str, object]:
        """Promote staged drafts into durable storage."""
        stores = request.app.state.container.stores
        result: CommitResult = stores.transient.commit()
        return asdict(result)

    @app.delete("/invitations/{invitation_id}")
    async def delete_invitation(invitation_id: str, request: Request) -> dict[str, str]:
        """Delete an invitation from both tiers."""
        stores = request.app.state.container.stores
        removed_draft = stores.transient.remove(invitation_id)
        removed_durable = stores.durable.remove(invitation_id)
        if not removed_draft and not removed_durable:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "deleted"}

    @app.post("/invitations/{invitation_id}/publish")
    async def publish_invitation(
        invitation_id: str,
        request: Request,
        x_user_id: str = Header(),
    ) -> dict[str, object]:
        """Upload media and publish a committed invitation to the backend."""
        state_container: AppContainer = request.app.state.container
        if state_container.publish_service is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Publishing backend is not configured",
            )
        published = await state_container.publish_service.publish(
            x_user_id, invitation_id
        )
        if published is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return record_to_wire(published)

    return app


def _outcome_payload(outcome: SaveOutcome) -> dict[str, object]:
    return {
        "id": outcome.record_id,
        "tier": outcome.tier.value,
        "fallback_reason": outcome.fallback_reason,
    }
