"""
Blog service: slugs, publishing, search and table of contents.
"""
import logging
import re
from datetime import datetime
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from prospectflow.db.models.post import Post
from prospectflow.db.models.user import User
from prospectflow.schemas.blog import PostCreate, PostUpdate, TocItem, validate_slug

logger = logging.getLogger(__name__)

STATUS_PUBLISHED = "published"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_HEADING = re.compile(r"^(#{2,4})\s+(.+?)\s*#*\s*$")
_FENCE = re.compile(r"^\s*(```|~~~)")


class SlugConflictError(ValueError):
    """Another post already uses the slug."""


def slugify(text: str) -> str:
    """Lowercase, collapse runs of non-alphanumerics into one hyphen, trim hyphens."""
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def heading_id(text: str) -> str:
    """Anchor id for a heading: lowercase, spaces to hyphens, other symbols dropped."""
    anchor = re.sub(r"\s+", "-", text.lower())
    return re.sub(r"[^\w-]+", "", anchor, flags=re.ASCII)


def extract_toc(content: str) -> List[TocItem]:
    """Table of contents from the ##, ### and #### headings outside code blocks."""
    items: List[TocItem] = []
    in_code = False
    for line in content.splitlines():
        if _FENCE.match(line):
            in_code = not in_code
            continue
        if in_code:
            continue
        match = _HEADING.match(line)
        if match:
            text = match.group(2).strip()
            items.append(TocItem(id=heading_id(text), level=len(match.group(1)), text=text))
    return items


def _ensure_slug_free(db: Session, slug: str, post_id: Optional[int] = None) -> None:
    query = db.query(Post).filter(Post.slug == slug)
    if post_id is not None:
        query = query.filter(Post.id != post_id)
    if query.first():
        raise SlugConflictError(f"A post with the slug '{slug}' already exists")


def create_post(db: Session, user: User, data: PostCreate) -> Post:
    """Create and publish a post. The slug is derived from the title when omitted."""
    slug = data.slug or validate_slug(slugify(data.title))
    _ensure_slug_free(db, slug)

    now = datetime.utcnow()
    post = Post(
        user_id=user.id,
        author_name_cache=user.full_name or user.email,
        title=data.title.strip(),
        slug=slug,
        content=data.content,
        excerpt=data.excerpt,
        cover_image_url=data.cover_image_url,
        status=STATUS_PUBLISHED,
        is_featured=False,
        published_at=now,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info(f"Published post id={post.id} slug={post.slug} by user_id={user.id}")
    return post


def list_published_posts(db: Session, search: Optional[str] = None) -> List[Post]:
    """Published posts, featured first, then newest."""
    query = db.query(Post).filter(Post.status == STATUS_PUBLISHED)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(
            Post.title.ilike(pattern),
            Post.excerpt.ilike(pattern),
            Post.author_name_cache.ilike(pattern),
        ))
    return query.order_by(Post.is_featured.desc(), Post.published_at.desc(), Post.id.desc()).all()


def get_published_post(db: Session, slug: str) -> Post:
    post = db.query(Post).filter(Post.slug == slug, Post.status == STATUS_PUBLISHED).first()
    if not post:
        raise LookupError("Post not found")
    return post


def _get_owned_post(db: Session, user: User, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        raise LookupError("Post not found")
    if post.user_id != user.id:
        raise PermissionError("You can only modify your own posts")
    return post


def update_post(db: Session, user: User, post_id: int, data: PostUpdate) -> Post:
    post = _get_owned_post(db, user, post_id)
    changes = data.model_dump(exclude_unset=True)

    if data.slug and data.slug != post.slug:
        _ensure_slug_free(db, data.slug, post.id)
        post.slug = data.slug
    if data.title:
        post.title = data.title.strip()
    if data.content:
        post.content = data.content
    if "excerpt" in changes:
        post.excerpt = (data.excerpt or "").strip() or None
    if "cover_image_url" in changes:
        post.cover_image_url = data.cover_image_url

    db.commit()
    db.refresh(post)
    logger.info(f"Updated post id={post.id} fields={sorted(changes)}")
    return post


def delete_post(db: Session, user: User, post_id: int) -> None:
    post = _get_owned_post(db, user, post_id)
    db.delete(post)
    db.commit()
    logger.info(f"Deleted post id={post_id} by user_id={user.id}")
