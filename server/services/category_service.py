# server/services/category_service.py
"""Category and location lookups used by the intake form"""
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.logger import get_logger
from models.category import Category, Location
from models.ticket import Ticket
from utils.exceptions import ConflictError, NotFoundError, ValidationError
from utils.validators import validate_category_code

logger = get_logger(__name__)


class CategoryService:
    """Category management. Codes are letters only and stored upper-case."""

    @staticmethod
    def list_categories(db: Session) -> List[Category]:
        return db.query(Category).order_by(Category.id).all()

    @staticmethod
    def get_category(db: Session, category_id: int) -> Category:
        category = db.get(Category, category_id)
        if not category:
            raise NotFoundError(f"Category not found: {category_id}")
        return category

    @staticmethod
    def create_category(db: Session, name: Optional[str], code: Optional[str]) -> Category:
        missing = [field for field, value in (("name", name), ("code", code)) if not (value or "").strip()]
        if missing:
            raise ValidationError("Required fields are missing", missing)

        normalized = CategoryService._normalize_code(code)
        CategoryService._ensure_code_free(db, normalized)

        category = Category(name=name.strip(), code=normalized)
        db.add(category)
        db.commit()
        db.refresh(category)
        logger.info(f"✓ Category created: {category.code}")
        return category

    @staticmethod
    def update_category(db: Session, category_id: int, name: Optional[str], code: Optional[str]) -> Category:
        """Rename a category or change its code. Issued control numbers keep the old code."""
        category = CategoryService.get_category(db, category_id)

        if name is not None:
            if not name.strip():
                raise ValidationError("Category name cannot be blank", ["name"])
            category.name = name.strip()

        if code is not None:
            normalized = CategoryService._normalize_code(code)
            if normalized != category.code:
                CategoryService._ensure_code_free(db, normalized)
                category.code = normalized

        db.commit()
        db.refresh(category)
        logger.info(f"✓ Category updated: {category.code}")
        return category

    @staticmethod
    def delete_category(db: Session, category_id: int) -> None:
        category = CategoryService.get_category(db, category_id)
        in_use = db.query(func.count(Ticket.id)).filter(Ticket.category_id == category_id).scalar()
        if in_use:
            raise ConflictError(f"Category {category.code} is used by {in_use} ticket(s)")

        db.delete(category)
        db.commit()
        logger.info(f"✓ Category deleted: {category.code}")

    @staticmethod
    def _normalize_code(code: str) -> str:
        try:
            return validate_category_code(code)
        except ValueError as e:
            raise ValidationError(str(e), ["code"])

    @staticmethod
    def _ensure_code_free(db: Session, code: str) -> None:
        if db.query(Category.id).filter(Category.code == code).first():
            raise ConflictError(f"Category code already exists: {code}")


class LocationService:
    """Location management."""

    @staticmethod
    def list_locations(db: Session) -> List[Location]:
        return db.query(Location).order_by(Location.name).all()

    @staticmethod
    def get_location(db: Session, location_id: int) -> Location:
        location = db.get(Location, location_id)
        if not location:
            raise NotFoundError(f"Location not found: {location_id}")
        return location

    @staticmethod
    def resolve_location(db: Session, value: str) -> str:
        """A numeric value naming a known location id resolves to its name; anything else is free text."""
        value = value.strip()
        if value.isdigit():
            location = db.get(Location, int(value))
            if location:
                return location.name
        return value

    @staticmethod
    def create_location(db: Session, name: Optional[str]) -> Location:
        if not (name or "").strip():
            raise ValidationError("Required fields are missing", ["name"])
        name = name.strip()
        if db.query(Location.id).filter(Location.name == name).first():
            raise ConflictError(f"Location already exists: {name}")

        location = Location(name=name)
        db.add(location)
        db.commit()
        db.refresh(location)
        logger.info(f"✓ Location created: {location.name}")
        return location

    @staticmethod
    def update_location(db: Session, location_id: int, name: Optional[str]) -> Location:
        location = LocationService.get_location(db, location_id)
        if not (name or "").strip():
            raise ValidationError("Location name cannot be blank", ["name"])
        name = name.strip()
        if name != location.name and db.query(Location.id).filter(Location.name == name).first():
            raise ConflictError(f"Location already exists: {name}")

        location.name = name
        db.commit()
        db.refresh(location)
        return location

    @staticmethod
    def delete_location(db: Session, location_id: int) -> None:
        location = LocationService.get_location(db, location_id)
        db.delete(location)
        db.commit()
        logger.info(f"✓ Location deleted: {location.name}")
