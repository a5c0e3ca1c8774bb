from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from eventhub.database.db import Base


def tag_slug(name: str) -> str:
    return name.strip().lower()


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)
