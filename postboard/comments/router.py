"""Comment API endpoints.

Provides routes for:
- Commenting on a post and listing a post's comments
- Reading, editing and deleting a single comment
"""

from fastapi import APIRouter, status

from postboard.auth.dependencies import CurrentUser
from postboard.auth.schemas import MessageResponse
from postboard.comments.dependencies import CommentServiceDep
from postboard.comments.schemas import (
    CommentEnvelope,
    CreateCommentRequest,
    UpdateCommentRequest,
)
from postboard.posts.schemas import (
    CommentDetailResponse,
    CommentListResponse,
    CommentWithPostResponse,
)


router = APIRouter(prefix="/api/comments", tags=["comments"])
post_comments_router = APIRouter(prefix="/api/posts", tags=["comments"])


# ==============================================================================
# Comments on a post
# ==============================================================================


@post_comments_router.post(
    "/{post_id}/comments",
    response_model=CommentWithPostResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on post",
)
async def create_comment(
    post_id: str,
    comment_service: CommentServiceDep,
    user: CurrentUser,
    data: CreateCommentRequest | None = None,
) -> CommentWithPostResponse:
    data = data or CreateCommentRequest()
    return await comment_service.create_comment(data.content, post_id, user)


@post_comments_router.get(
    "/{post_id}/comments",
    response_model=CommentListResponse,
    response_model_exclude_none=True,
    summary="List comments on post",
)
async def list_comments(
    post_id: str, comment_service: CommentServiceDep, _user: CurrentUser
) -> CommentListResponse:
    """Get a post and its comments, oldest first."""
    return await comment_service.get_comments(post_id)


# ==============================================================================
# Single comment
# ==============================================================================


@router.get(
    "/{comment_id}",
    response_model=CommentDetailResponse,
    response_model_exclude_none=True,
    summary="Get comment",
)
async def get_comment(
    comment_id: str, comment_service: CommentServiceDep, _user: CurrentUser
) -> CommentDetailResponse:
    return await comment_service.get_comment(comment_id)


@router.patch(
    "/{comment_id}",
    response_model=CommentEnvelope,
    response_model_exclude_none=True,
    summary="Update comment",
    responses={401: {"description": "Not the author"}},
)
async def update_comment(
    comment_id: str,
    comment_service: CommentServiceDep,
    user: CurrentUser,
    data: UpdateCommentRequest | None = None,
) -> CommentEnvelope:
    data = data or UpdateCommentRequest()
    comment = await comment_service.update_comment(data.content, comment_id, user)
    return CommentEnvelope(comment=comment)


@router.delete(
    "/{comment_id}",
    response_model=MessageResponse,
    summary="Delete comment",
    responses={401: {"description": "Not the author"}},
)
async def delete_comment(
    comment_id: str, comment_service: CommentServiceDep, user: CurrentUser
) -> MessageResponse:
    """Delete a comment and its likes."""
    await comment_service.delete_comment(comment_id, user)
    return MessageResponse(message="Comment deleted.")
