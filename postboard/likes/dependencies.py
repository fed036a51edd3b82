"""FastAPI dependencies for likes."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from postboard.likes.service import LikeService


async def get_like_service(request: Request) -> LikeService:
    """Get like service from app state."""
    app_state = request.app.state
    if not getattr(app_state, "like_service", None):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Like service unavailable",
        )
    return app_state.like_service


LikeServiceDep = Annotated[LikeService, Depends(get_like_service)]
