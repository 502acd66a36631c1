"""SQLAlchemy table definition for stored recipes."""

from typing import Optional

from sqlalchemy import Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, validates

from src.models.models import MAX_RATING, MIN_RATING


class Base(DeclarativeBase):
    pass


class RecipeRecord(Base):
    """One row of the Recipe table. Column names follow the source CSV headers."""

    __tablename__ = "Recipe"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    url: Mapped[Optional[str]] = mapped_column(String)
    category: Mapped[Optional[str]] = mapped_column(String, index=True)
    author: Mapped[Optional[str]] = mapped_column(String, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    rating: Mapped[Optional[float]] = mapped_column(Float)
    rating_count: Mapped[Optional[int]] = mapped_column(Integer)
    review_count: Mapped[Optional[int]] = mapped_column(Integer)
    ingredients: Mapped[str] = mapped_column(Text, nullable=False, default="")
    directions: Mapped[str] = mapped_column(Text, nullable=False, default="")
    prep_time: Mapped[Optional[str]] = mapped_column(String)
    cook_time: Mapped[Optional[str]] = mapped_column(String)
    total_time: Mapped[Optional[str]] = mapped_column(String)
    servings: Mapped[Optional[int]] = mapped_column(Integer)
    yields: Mapped[Optional[str]] = mapped_column(String)
    calories: Mapped[Optional[int]] = mapped_column(Integer)
    carbohydrates_g: Mapped[Optional[float]] = mapped_column(Float)
    sugars_g: Mapped[Optional[float]] = mapped_column(Float)
    fat_g: Mapped[Optional[float]] = mapped_column(Float)
    protein_g: Mapped[Optional[float]] = mapped_column(Float)
    sodium_mg: Mapped[Optional[int]] = mapped_column(Integer)
    instructions_list: Mapped[Optional[str]] = mapped_column(Text)
    image: Mapped[Optional[str]] = mapped_column(String)

    @validates("rating")
    def validate_rating(self, key: str, value: Optional[float]) -> Optional[float]:
        """Reject ratings the Recipe model could not read back."""
        if value is not None and not (MIN_RATING <= value <= MAX_RATING):
            raise ValueError(f"{key} must be between {MIN_RATING} and {MAX_RATING}, got: {value}")
        return value

    def __repr__(self) -> str:
        return f"RecipeRecord(id={self.id!r}, title={self.title!r})"
