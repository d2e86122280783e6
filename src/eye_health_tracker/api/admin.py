"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from eye_health_tracker.containers import AppContainer

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


@router.get("/plates", dependencies=[Depends(require_admin)])
async def plate_summary(request: Request) -> dict[str, object]:
    """Return a summary of the loaded plate catalog."""
    container: AppContainer = request.app.state.container
    plates = container.plate_catalog.plates
    return {
        "total": len(plates),
        "discriminative": sum(1 for plate in plates if plate.is_discriminative),
        "plates": [
            {
                "id": plate.id,
                "image_ref": plate.image_ref,
                "expected_normal": plate.expected_normal,
                "expected_protan": plate.expected_protan,
                "expected_deutan": plate.expected_deutan,
            }
            for plate in plates
        ],
    }


@router.get("/results/{user_id}", dependencies=[Depends(require_admin)])
async def user_results(
    user_id: UUID, request: Request, limit: int = 20
) -> dict[str, object]:
    """Return recent color-vision results for a user."""
    container: AppContainer = request.app.state.container
    results = container.result_service.list_recent(user_id, limit=limit)
    return {
        "user_id": str(user_id),
        "results": [
            {
                "id": str(result.id),
                "score": result.score,
                "xp_earned": result.xp_earned,
                "subtype": result.details.get("subtype"),
                "created_at": result.created_at.isoformat(),
            }
            for result in results
        ],
    }
