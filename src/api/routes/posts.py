"""Posts API routes: feed, likes and comments."""

from fastapi import APIRouter, Depends

from api.dependencies.auth import CurrentUser
from api.dependencies.services import get_post_service
from api.schemas.common import SuccessResponse
from api.schemas.post import CommentResponse, LikeResponse, PostCreate, PostResponse
from domain.entities.post import Post
from domain.services.post_service import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


def _to_response(post: Post) -> PostResponse:
    return PostResponse(
        id=post.id,
        user=post.user_id,
        text=post.text,
        name=post.name,
        avatar=post.avatar,
        likes=[LikeResponse(user=like.user_id) for like in post.likes],
        comments=[
            CommentResponse(
                id=comment.id,
                user=comment.user_id,
                text=comment.text,
                name=comment.name,
                avatar=comment.avatar,
                date=comment.created_at,
            )
            for comment in post.comments
        ],
        date=post.created_at,
    )


@router.get("", response_model=list[PostResponse], summary="List posts")
async def list_posts(
    service: PostService = Depends(get_post_service),
) -> list[PostResponse]:
    """Get all posts, newest first."""
    return [_to_response(post) for post in await service.get_all()]


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    summary="Get a post",
    responses={404: {"description": "Post not found"}},
)
async def get_post(
    post_id: str,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Get a single post by id."""
    return _to_response(await service.get_by_id(post_id))


@router.post(
    "",
    response_model=PostResponse,
    summary="Create a post",
    responses={400: {"description": "Invalid text"}},
)
async def create_post(
    body: PostCreate,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Create a post as the authenticated user."""
    post = await service.create(
        user.id, body.model_dump(), name=user.name, avatar=user.avatar
    )
    return _to_response(post)


@router.delete(
    "/{post_id}",
    response_model=SuccessResponse,
    summary="Delete a post",
    responses={
        401: {"description": "Post belongs to another user"},
        404: {"description": "Post not found"},
    },
)
async def delete_post(
    post_id: str,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> SuccessResponse:
    """Delete one of the authenticated user's posts."""
    await service.delete(post_id, user.id)
    return SuccessResponse()


@router.post(
    "/like/{post_id}",
    response_model=PostResponse,
    summary="Like a post",
    responses={
        400: {"description": "Already liked"},
        404: {"description": "Post not found"},
    },
)
async def like_post(
    post_id: str,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Add the authenticated user's like."""
    return _to_response(await service.like(post_id, user.id))


@router.post(
    "/unlike/{post_id}",
    response_model=PostResponse,
    summary="Unlike a post",
    responses={
        400: {"description": "Not liked yet"},
        404: {"description": "Post not found"},
    },
)
async def unlike_post(
    post_id: str,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Remove the authenticated user's like."""
    return _to_response(await service.unlike(post_id, user.id))


@router.post(
    "/comment/{post_id}",
    response_model=PostResponse,
    summary="Comment on a post",
    responses={
        400: {"description": "Invalid text"},
        404: {"description": "Post not found"},
    },
)
async def add_comment(
    post_id: str,
    body: PostCreate,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Prepend a comment to the post."""
    post = await service.add_comment(
        post_id, user.id, body.model_dump(), name=user.name, avatar=user.avatar
    )
    return _to_response(post)


@router.delete(
    "/comment/{post_id}/{comment_id}",
    response_model=PostResponse,
    summary="Remove a comment",
    responses={404: {"description": "Post or comment not found"}},
)
async def remove_comment(
    post_id: str,
    comment_id: str,
    user: CurrentUser,
    service: PostService = Depends(get_post_service),
) -> PostResponse:
    """Remove a comment from the post."""
    return _to_response(await service.remove_comment(post_id, comment_id))
