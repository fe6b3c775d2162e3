"""Admin product wizard router: enter a product one field at a time."""

from fastapi import APIRouter, Depends, Request, status
from libs.auth.dependencies import require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    ProductResponse,
    WizardStateResponse,
    WizardStepRequest,
)
from services.store_service.services.product_wizard import (
    ProductWizardRegistry,
    ProductWizardSession,
)
from services.store_service.services.repositories import ProductRepository
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/product-wizard", tags=["admin-store"])

products = ProductRepository()


def get_wizard_registry(request: Request) -> ProductWizardRegistry:
    return request.app.state.wizard_registry


def _state(session: ProductWizardSession) -> WizardStateResponse:
    return WizardStateResponse(
        step=session.current_step,
        prompt=session.prompt,
        collected=dict(session.values),
        completed=session.completed,
    )


@router.post("/start", response_model=WizardStateResponse)
async def start_wizard(
    current_user: AuthUser = Depends(require_admin),
    registry: ProductWizardRegistry = Depends(get_wizard_registry),
):
    """Start (or restart) product entry for the calling admin."""
    return _state(registry.start(current_user.user_id))


@router.get("", response_model=WizardStateResponse)
async def get_wizard(
    current_user: AuthUser = Depends(require_admin),
    registry: ProductWizardRegistry = Depends(get_wizard_registry),
):
    return _state(registry.get(current_user.user_id))


@router.post("/step", response_model=WizardStateResponse)
async def submit_step(
    step_in: WizardStepRequest,
    current_user: AuthUser = Depends(require_admin),
    registry: ProductWizardRegistry = Depends(get_wizard_registry),
    db: AsyncSession = Depends(get_async_db),
):
    """Answer the current step. The product is created after the last one."""
    session = registry.get(current_user.user_id)
    session.submit(step_in.value)
    state = _state(session)
    if session.completed:
        # A finished session is dropped even when the product cannot be built
        try:
            product = await products.create(db, session.to_product_create())
        finally:
            registry.finish(current_user.user_id)
        state.product = ProductResponse.model_validate(product)
    return state


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_wizard(
    current_user: AuthUser = Depends(require_admin),
    registry: ProductWizardRegistry = Depends(get_wizard_registry),
):
    registry.cancel(current_user.user_id)
