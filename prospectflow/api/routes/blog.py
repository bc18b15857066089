"""
Blog endpoints.

Reading is public; writing requires an account and only the author may edit
or delete a post.
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from prospectflow.db.models.user import User
from prospectflow.core.auth_dependency import get_db, get_current_user_obj
from prospectflow.schemas.blog import (
    PostCreate,
    PostUpdate,
    PostResponse,
    PostDetailResponse,
    PostListResponse,
)
from prospectflow.services import blog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog", tags=["Blog"])


def _detail(post) -> PostDetailResponse:
    return PostDetailResponse(
        **PostResponse.model_validate(post).model_dump(),
        toc=blog_service.extract_toc(post.content),
    )


@router.get("/posts", response_model=PostListResponse)
def list_posts(
    search: Optional[str] = Query(None, description="Search in title, excerpt and author"),
    db: Session = Depends(get_db)
):
    """Published posts, featured first, then newest."""
    posts = blog_service.list_published_posts(db, search)
    return PostListResponse(posts=[PostResponse.model_validate(p) for p in posts], total=len(posts))


@router.get("/posts/{slug}", response_model=PostDetailResponse)
def get_post(slug: str, db: Session = Depends(get_db)):
    """A published post with its table of contents."""
    try:
        return _detail(blog_service.get_published_post(db, slug))
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/posts", status_code=status.HTTP_201_CREATED, response_model=PostDetailResponse)
def create_post(
    data: PostCreate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        post = blog_service.create_post(db, user, data)
    except blog_service.SlugConflictError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Cannot derive a slug from the title: {e}")
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create post: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create post"
        )

    return _detail(post)


@router.put("/posts/{post_id}", response_model=PostDetailResponse)
def update_post(
    post_id: int,
    data: PostUpdate,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        post = blog_service.update_post(db, user, post_id, data)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except blog_service.SlugConflictError as e:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update post {post_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update post"
        )

    return _detail(post)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    user: User = Depends(get_current_user_obj),
    db: Session = Depends(get_db)
):
    try:
        blog_service.delete_post(db, user, post_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
