"""Short link redirect route."""

from fastapi import APIRouter, Request, status
from fastapi.responses import RedirectResponse

router = APIRouter()


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL. Unknown or deactivated codes give 404."""
    original_url = await request.app.state.service.query(short_code)

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
