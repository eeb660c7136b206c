r"""
SQLAlchemy mappings of the tables the benchmark touches.

Only the columns the scenarios read or write are mapped.

    from access_bench.models import Instructor

    stmt = select(Instructor).order_by(Instructor.created_at.desc()).limit(100)
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

__all__ = [
    "Base",
    "Book",
    "FeaturedInstructor",
    "Instructor",
    "InstructorBook",
    "InstructorKeyword",
    "InstructorSocialLink",
    "Keyword",
    "Post",
    "PostComment",
    "model_for",
]


class Base(DeclarativeBase):
    pass


class Post(Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False)


class PostComment(Base):
    __tablename__ = "post_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id"))
    user_id: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class Keyword(Base):
    __tablename__ = "keywords"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True)


class Book(Base):
    __tablename__ = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String)
    url: Mapped[str] = mapped_column(String, unique=True)


class Instructor(Base):
    __tablename__ = "instructors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String)
    last_name: Mapped[str] = mapped_column(String)
    honorific: Mapped[str | None] = mapped_column(String)
    slug: Mapped[str] = mapped_column(String, unique=True)
    title: Mapped[str | None] = mapped_column(String)
    bio: Mapped[str | None] = mapped_column(Text)
    short_bio: Mapped[str | None] = mapped_column(Text)
    trailer_url: Mapped[str | None] = mapped_column(String)
    is_published: Mapped[bool] = mapped_column(Boolean, default=False)
    user_id: Mapped[str | None] = mapped_column(String)
    firestore_id: Mapped[str | None] = mapped_column(String, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    social_links: Mapped["InstructorSocialLink"] = relationship(back_populates="instructor")
    books: Mapped[list["InstructorBook"]] = relationship(back_populates="instructor")
    keywords: Mapped[list["InstructorKeyword"]] = relationship(back_populates="instructor")
    featured: Mapped[list["FeaturedInstructor"]] = relationship(back_populates="instructor")


class InstructorSocialLink(Base):
    __tablename__ = "instructor_social_links"

    instructor_id: Mapped[int] = mapped_column(ForeignKey("instructors.id"), primary_key=True)
    facebook: Mapped[str | None] = mapped_column(String)
    twitter: Mapped[str | None] = mapped_column(String)
    instagram: Mapped[str | None] = mapped_column(String)
    youtube: Mapped[str | None] = mapped_column(String)
    tiktok: Mapped[str | None] = mapped_column(String)
    website: Mapped[str | None] = mapped_column(String)

    instructor: Mapped[Instructor] = relationship(back_populates="social_links")


class InstructorBook(Base):
    __tablename__ = "instructor_books"

    instructor_id: Mapped[int] = mapped_column(ForeignKey("instructors.id"), primary_key=True)
    book_id: Mapped[int] = mapped_column(ForeignKey("books.id"), primary_key=True)

    instructor: Mapped[Instructor] = relationship(back_populates="books")
    book: Mapped[Book] = relationship()


class InstructorKeyword(Base):
    __tablename__ = "instructor_keywords"

    instructor_id: Mapped[int] = mapped_column(ForeignKey("instructors.id"), primary_key=True)
    keyword_id: Mapped[int] = mapped_column(ForeignKey("keywords.id"), primary_key=True)
    order: Mapped[int] = mapped_column(Integer, default=0)

    instructor: Mapped[Instructor] = relationship(back_populates="keywords")
    keyword: Mapped[Keyword] = relationship()


class FeaturedInstructor(Base):
    __tablename__ = "featured_instructors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    instructor_id: Mapped[int] = mapped_column(ForeignKey("instructors.id"))
    order: Mapped[int] = mapped_column(Integer, default=0)

    instructor: Mapped[Instructor] = relationship(back_populates="featured")


_MODELS: dict[str, type[Base]] = {
    model.__tablename__: model
    for model in (
        Post,
        PostComment,
        Keyword,
        Book,
        Instructor,
        InstructorSocialLink,
        InstructorBook,
        InstructorKeyword,
        FeaturedInstructor,
    )
}


def model_for(table: str) -> type[Base]:
    """Get the mapped class for a table name.

    Raises:
        ValueError: If the table is not mapped.
    """
    model = _MODELS.get(table)
    if model is None:
        valid = ", ".join(sorted(_MODELS))
        msg = f"No model mapped for table '{table}'. Mapped: {valid}"
        raise ValueError(msg)
    return model
