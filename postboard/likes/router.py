"""Like API endpoints.

The same request adds the like when absent and removes it when present;
the status code tells which happened (201 added, 200 removed).
"""

from fastapi import APIRouter, Response, status

from postboard.auth.dependencies import CurrentUser
from postboard.comments.schemas import CommentLikeResponse
from postboard.likes.dependencies import LikeServiceDep
from postboard.likes.models import TargetKind
from postboard.posts.schemas import PostLikeResponse


router = APIRouter(prefix="/api", tags=["likes"])


def _toggled_status(created: bool) -> int:
    return status.HTTP_201_CREATED if created else status.HTTP_200_OK


@router.post(
    "/posts/{post_id}/likes",
    response_model=PostLikeResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Like or unlike post",
    responses={200: {"description": "Like removed"}},
)
async def toggle_post_like(
    post_id: str,
    response: Response,
    like_service: LikeServiceDep,
    user: CurrentUser,
) -> PostLikeResponse:
    document, created = await like_service.handle_like(TargetKind.POST, post_id, user)
    response.status_code = _toggled_status(created)
    return PostLikeResponse(document=document)


@router.post(
    "/comments/{comment_id}/likes",
    response_model=CommentLikeResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Like or unlike comment",
    responses={200: {"description": "Like removed"}},
)
async def toggle_comment_like(
    comment_id: str,
    response: Response,
    like_service: LikeServiceDep,
    user: CurrentUser,
) -> CommentLikeResponse:
    document, created = await like_service.handle_like(
        TargetKind.COMMENT, comment_id, user
    )
    response.status_code = _toggled_status(created)
    return CommentLikeResponse(document=document)
