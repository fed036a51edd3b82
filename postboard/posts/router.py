"""Post API endpoints.

Provides routes for:
- Post CRUD (owner only for update and delete)
- Paginated search over all posts
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from postboard.auth.dependencies import CurrentUser
from postboard.auth.schemas import MessageResponse
from postboard.posts.dependencies import PostServiceDep
from postboard.posts.schemas import (
    CreatePostRequest,
    PostEnvelope,
    PostListResponse,
    UpdatePostRequest,
)


router = APIRouter(prefix="/api/posts", tags=["posts"])


@router.post(
    "",
    response_model=PostEnvelope,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
)
async def create_post(
    post_service: PostServiceDep,
    user: CurrentUser,
    data: CreatePostRequest | None = None,
) -> PostEnvelope:
    data = data or CreatePostRequest()
    post = await post_service.create_post(data.title, data.content, user)
    return PostEnvelope(post=post)


@router.get(
    "",
    response_model=PostListResponse,
    response_model_exclude_none=True,
    summary="List posts",
)
async def list_posts(
    post_service: PostServiceDep,
    _user: CurrentUser,
    q: Annotated[str | None, Query(description="Search title and content")] = None,
    sort_by: Annotated[
        str | None, Query(alias="sortBy", description="'title' or updated time")
    ] = None,
    direction: Annotated[str | None, Query(description="'asc' or 'desc'")] = None,
    page: Annotated[str | None, Query(description="Page number, from 1")] = None,
    limit: Annotated[str | None, Query(description="Posts per page")] = None,
) -> PostListResponse:
    """Search posts by title or content, sorted and paged.

    Invalid ``page`` or ``limit`` values fall back to 1 and 5.
    """
    return await post_service.get_posts(
        q=q, sort_by=sort_by, direction=direction, page=page, limit=limit
    )


@router.get(
    "/{post_id}",
    response_model=PostEnvelope,
    response_model_exclude_none=True,
    summary="Get post",
)
async def get_post(
    post_id: str, post_service: PostServiceDep, _user: CurrentUser
) -> PostEnvelope:
    """Get a post with its author, likes and comments."""
    return PostEnvelope(post=await post_service.get_post(post_id))


@router.patch(
    "/{post_id}",
    response_model=PostEnvelope,
    response_model_exclude_none=True,
    summary="Update post",
    responses={401: {"description": "Not the author"}},
)
async def update_post(
    post_id: str,
    post_service: PostServiceDep,
    user: CurrentUser,
    data: UpdatePostRequest | None = None,
) -> PostEnvelope:
    data = data or UpdatePostRequest()
    post = await post_service.update_post(
        post_id, user, title=data.title, content=data.content
    )
    return PostEnvelope(post=post)


@router.delete(
    "/{post_id}",
    response_model=MessageResponse,
    summary="Delete post",
    responses={401: {"description": "Not the author"}},
)
async def delete_post(
    post_id: str, post_service: PostServiceDep, user: CurrentUser
) -> MessageResponse:
    """Delete a post along with its comments and all their likes."""
    await post_service.delete_post(post_id, user)
    return MessageResponse(message="Post deleted.")
