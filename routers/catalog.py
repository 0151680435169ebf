from fastapi import APIRouter
from starlette import status
from schemas.catalog_schemas import (ProductRequest, ProductResponse, CategoryRequest, CategoryResponse)
from services.catalog_service import CatalogService
from utils.deps import db_dependency, admin_dependency


products_router = APIRouter(
    prefix="/api/products",
    tags=["products"]
)

categories_router = APIRouter(
    prefix="/api/categories",
    tags=["categories"]
)


@products_router.get("", response_model=list[ProductResponse])
def list_products(db: db_dependency):
    return CatalogService.list_products(db)


@products_router.get("/featured", response_model=list[ProductResponse])
def list_featured_products(db: db_dependency):
    return CatalogService.list_featured_products(db)


@products_router.get("/slug/{slug}", response_model=ProductResponse)
def get_product_by_slug(slug: str, db: db_dependency):
    return CatalogService.get_product_by_slug(slug, db)


@products_router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: db_dependency):
    return CatalogService.get_product(product_id, db)


@products_router.post("", status_code=status.HTTP_201_CREATED, response_model=ProductResponse)
def create_product(body: ProductRequest, admin: admin_dependency, db: db_dependency):
    return CatalogService.create_product(body, db)


@products_router.put("/{product_id}", response_model=ProductResponse)
def update_product(product_id: int, body: ProductRequest, admin: admin_dependency, db: db_dependency):
    return CatalogService.update_product(product_id, body, db)


@products_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, admin: admin_dependency, db: db_dependency):
    CatalogService.delete_product(product_id, db)


@categories_router.get("", response_model=list[CategoryResponse])
def list_categories(db: db_dependency):
    return CatalogService.list_categories(db)


@categories_router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: db_dependency):
    return CatalogService.get_category(category_id, db)


@categories_router.get("/{category_id}/products", response_model=list[ProductResponse])
def list_category_products(category_id: int, db: db_dependency):
    return CatalogService.list_category_products(category_id, db)


@categories_router.post("", status_code=status.HTTP_201_CREATED, response_model=CategoryResponse)
def create_category(body: CategoryRequest, admin: admin_dependency, db: db_dependency):
    return CatalogService.create_category(body, db)


@categories_router.put("/{category_id}", response_model=CategoryResponse)
def update_category(category_id: int, body: CategoryRequest, admin: admin_dependency, db: db_dependency):
    return CatalogService.update_category(category_id, body, db)


@categories_router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: int, admin: admin_dependency, db: db_dependency):
    CatalogService.delete_category(category_id, db)
