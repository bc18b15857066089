"""
Post model for blog articles.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from prospectflow.db.base import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    author_name_cache = Column(String, nullable=True)

    title = Column(String(200), nullable=False)
    slug = Column(String(250), unique=True, nullable=False, index=True)
    content = Column(Text, nullable=False)  # markdown
    excerpt = Column(String(300), nullable=True)
    cover_image_url = Column(String, nullable=True)
    status = Column(String, nullable=False, default="published")  # draft | published
    is_featured = Column(Boolean, default=False, nullable=False)

    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    author = relationship("User", backref="posts")

    __table_args__ = (
        Index("idx_posts_status_published", "status", "published_at"),
    )

    def __repr__(self):
        return f"<Post(id={self.id}, slug='{self.slug}')>"
