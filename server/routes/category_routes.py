# server/routes/category_routes.py
"""Category and location management routes (intake form dropdowns)"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.database import get_db
from schemas.category import CategoryRequest, CategoryResponse, LocationRequest, LocationResponse
from schemas.common import MessageResponse
from services.category_service import CategoryService, LocationService

router = APIRouter(prefix="/api/categories", tags=["Categories"])
location_router = APIRouter(prefix="/api/locations", tags=["Locations"])


# ==================== CATEGORIES ====================

@router.get("", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    return [CategoryResponse.model_validate(c) for c in CategoryService.list_categories(db)]


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return CategoryResponse.model_validate(CategoryService.get_category(db, category_id))


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(request: CategoryRequest, db: Session = Depends(get_db)):
    """Create a category. The code must be letters only and is stored upper-case."""
    category = CategoryService.create_category(db, request.name, request.code)
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category(category_id: int, request: CategoryRequest, db: Session = Depends(get_db)):
    category = CategoryService.update_category(db, category_id, request.name, request.code)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    """Delete an unused category"""
    CategoryService.delete_category(db, category_id)
    return MessageResponse(message="Category deleted successfully")


# ==================== LOCATIONS ====================

@location_router.get("", response_model=List[LocationResponse])
def list_locations(db: Session = Depends(get_db)):
    return [LocationResponse.model_validate(l) for l in LocationService.list_locations(db)]


@location_router.post("", response_model=LocationResponse, status_code=201)
def create_location(request: LocationRequest, db: Session = Depends(get_db)):
    return LocationResponse.model_validate(LocationService.create_location(db, request.name))


@location_router.put("/{location_id}", response_model=LocationResponse)
def update_location(location_id: int, request: LocationRequest, db: Session = Depends(get_db)):
    location = LocationService.update_location(db, location_id, request.name)
    return LocationResponse.model_validate(location)


@location_router.delete("/{location_id}", response_model=MessageResponse)
def delete_location(location_id: int, db: Session = Depends(get_db)):
    LocationService.delete_location(db, location_id)
    return MessageResponse(message="Location deleted successfully")
