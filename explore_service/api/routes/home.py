"""
Home routes
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from typing import Optional

from ...schemas import HomeResponse, AccountSummary
from ...domain.models import User
from ...application.services import HomeService
from ..dependencies import get_home_service, get_current_user_optional, get_remembered_username


router = APIRouter(tags=["Home"])


@router.get("/", response_model=HomeResponse)
async def home(
    current_user: Optional[User] = Depends(get_current_user_optional),
    remembered_username: Optional[str] = Depends(get_remembered_username),
    home_service: HomeService = Depends(get_home_service)
):
    """
    Home page

    Signed-in users get their dashboard (or the activation page), anonymous
    visitors with a remembered login are redirected to the login page.
    """
    view = home_service.resolve(current_user, remembered_username)

    if view.redirect_to is not None:
        return RedirectResponse(url=view.redirect_to, status_code=status.HTTP_302_FOUND)

    return HomeResponse(
        template=view.template,
        title=view.title,
        page_is_home=view.page_is_home,
        user=AccountSummary.from_user(view.user, show_email=True) if view.user else None,
    )
