"""Category API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeloop.api.limiter import limiter, mutation_rate_limit
from timeloop.database import get_db
from timeloop.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
)
from timeloop.services.tracking_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    db: AsyncSession = Depends(get_db),
):
    """List all categories."""
    service = CategoryService(db)
    categories = await service.get_all()
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(mutation_rate_limit)
async def create_category(
    request: Request,
    data: CategoryCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a new category."""
    service = CategoryService(db)
    category = await service.create(name=data.name, color=data.color)
    return CategoryResponse.model_validate(category)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a category by ID."""
    service = CategoryService(db)
    category = await service.get_by_id(category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Category not found",
        )
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(mutation_rate_limit)
async def update_category(
    request: Request,
    category_id: int,
    data: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Rename and recolor a category."""
    service = CategoryService(db)
    await service.update(category_id, name=data.name, color=data.color)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(mutation_rate_limit)
async def delete_category(
    request: Request,
    category_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a category. Its entries become uncategorized."""
    service = CategoryService(db)
    await service.delete(category_id)
