import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from devconnect.config import config
from devconnect.domain import commands, exceptions
from devconnect.entrypoints.schemas.post import CommentI, DeleteResult, Post, PostI
from devconnect.security import AuthenticatedUser, get_current_user
from devconnect.service_layer.messagebus import MessageBus
from devconnect.views import posts as post_views

router = APIRouter()

logger = logging.getLogger(__name__)

NO_POST_WITH_ID = {"nopostfound": "No post found with that id"}
POST_NOT_FOUND = {"postnotfound": "No post found"}

CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


def get_bus() -> MessageBus:
    # one bus, and so one unit of work per message, for every request
    from devconnect.bootstrap import bootstrap
    return bootstrap()


Bus = Annotated[MessageBus, Depends(get_bus)]


def _parse_post_id(post_id: str, not_found: dict) -> int:
    try:
        return int(post_id)
    except ValueError:
        raise HTTPException(status_code=404, detail=not_found)


def _conflict(e: exceptions.ConcurrencyConflict) -> HTTPException:
    logger.warning(f"Lost update detected: {e}")
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={"conflict": "Post was modified by another request, retry"},
    )


@router.get("/api/posts/test")
async def test_posts():
    return {"msg": "Posts works"}


@router.get("/api/posts", response_model=list[Post], status_code=200)
async def get_all_posts(bus: Bus):
    try:
        posts = post_views.list_posts(bus.uow_factory())
    except exceptions.StoreFailure:
        raise HTTPException(status_code=404, detail={"nopostsfound": "No posts found"})
    if not posts and config.LEGACY_EMPTY_POSTS_404:
        raise HTTPException(status_code=404, detail={"nopostsfound": "No posts found"})
    return [Post.model_validate(post) for post in posts]


@router.get("/api/posts/{post_id}", response_model=Post, status_code=200)
async def get_post(post_id: str, bus: Bus):
    try:
        post = post_views.get_post(bus.uow_factory(), _parse_post_id(post_id, NO_POST_WITH_ID))
    except (exceptions.PostNotFound, exceptions.StoreFailure):
        raise HTTPException(status_code=404, detail=NO_POST_WITH_ID)
    return Post.model_validate(post)


@router.post("/api/posts", response_model=Post, status_code=200)
async def create_post(post: PostI, current_user: CurrentUser, bus: Bus):
    cmd = commands.CreatePost(
        user_id=current_user.id,
        text=post.text,
        name=post.name,
        avatar=post.avatar,
    )
    try:
        [created] = bus.handle(cmd)
    except exceptions.ValidationFailed as e:
        raise HTTPException(status_code=400, detail=e.errors)
    return Post.model_validate(created)


@router.delete("/api/posts/{post_id}", response_model=DeleteResult, status_code=200)
async def delete_post(post_id: str, current_user: CurrentUser, bus: Bus):
    cmd = commands.DeletePost(post_id=_parse_post_id(post_id, POST_NOT_FOUND), user_id=current_user.id)
    try:
        bus.handle(cmd)
    except exceptions.PostNotFound:
        raise HTTPException(status_code=404, detail=POST_NOT_FOUND)
    except exceptions.Unauthorized:
        raise HTTPException(status_code=401, detail={"notauthorized": "User not authorized"})
    return {"success": True}


@router.post("/api/posts/like/{post_id}", response_model=Post, status_code=200)
async def like_post(post_id: str, current_user: CurrentUser, bus: Bus):
    cmd = commands.LikePost(post_id=_parse_post_id(post_id, POST_NOT_FOUND), user_id=current_user.id)
    try:
        [post] = bus.handle(cmd)
    except exceptions.NoProfile:
        raise HTTPException(status_code=401, detail={"noprofile": "There is no profile for this user"})
    except exceptions.PostNotFound:
        raise HTTPException(status_code=404, detail=POST_NOT_FOUND)
    except exceptions.AlreadyLiked:
        raise HTTPException(status_code=400, detail={"alreadyliked": "User already liked this post"})
    except exceptions.ConcurrencyConflict as e:
        raise _conflict(e)
    return Post.model_validate(post)


@router.post("/api/posts/unlike/{post_id}", response_model=Post, status_code=200)
async def unlike_post(post_id: str, current_user: CurrentUser, bus: Bus):
    cmd = commands.UnlikePost(post_id=_parse_post_id(post_id, POST_NOT_FOUND), user_id=current_user.id)
    try:
        [post] = bus.handle(cmd)
    except exceptions.NoProfile:
        raise HTTPException(status_code=401, detail={"noprofile": "There is no profile for this user"})
    except exceptions.PostNotFound:
        raise HTTPException(status_code=404, detail=POST_NOT_FOUND)
    except exceptions.NotLiked:
        raise HTTPException(status_code=400, detail={"notliked": "You have not yet liked this post"})
    except exceptions.ConcurrencyConflict as e:
        raise _conflict(e)
    return Post.model_validate(post)


@router.post("/api/posts/comment/{post_id}", response_model=Post, status_code=200)
async def add_comment(post_id: str, comment: CommentI, current_user: CurrentUser, bus: Bus):
    cmd = commands.AddComment(
        post_id=_parse_post_id(post_id, POST_NOT_FOUND),
        user_id=current_user.id,
        text=comment.text,
        name=comment.name,
        avatar=comment.avatar,
    )
    try:
        [post] = bus.handle(cmd)
    except exceptions.ValidationFailed as e:
        raise HTTPException(status_code=400, detail=e.errors)
    except exceptions.PostNotFound:
        raise HTTPException(status_code=404, detail=POST_NOT_FOUND)
    except exceptions.ConcurrencyConflict as e:
        raise _conflict(e)
    return Post.model_validate(post)


@router.delete("/api/posts/comment/{post_id}/{comment_id}", response_model=Post, status_code=200)
async def remove_comment(post_id: str, comment_id: str, current_user: CurrentUser, bus: Bus):
    cmd = commands.RemoveComment(
        post_id=_parse_post_id(post_id, POST_NOT_FOUND), comment_id=comment_id, user_id=current_user.id
    )
    try:
        [post] = bus.handle(cmd)
    except exceptions.PostNotFound:
        raise HTTPException(status_code=404, detail=POST_NOT_FOUND)
    except exceptions.CommentNotFound:
        raise HTTPException(status_code=404, detail={"commentnotexists": "Comment does not exist"})
    except exceptions.Unauthorized:
        raise HTTPException(status_code=401, detail={"notauthorized": "User not authorized"})
    except exceptions.ConcurrencyConflict as e:
        raise _conflict(e)
    return Post.model_validate(post)
