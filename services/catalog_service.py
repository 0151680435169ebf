from sqlalchemy.orm import Session
from core.exceptions import ConflictError, NotFoundError, ValidationError
from models.categories import Category
from models.products import Product
from schemas.catalog_schemas import ProductRequest, CategoryRequest
from utils.logger import get_logger

logger = get_logger(__name__)


class CatalogService:
    """Products and categories. Reads are public; writes are admin-only at the router."""

    @staticmethod
    def list_products(db: Session) -> list[Product]:
        return db.query(Product).order_by(Product.id).all()

    @staticmethod
    def list_featured_products(db: Session) -> list[Product]:
        return db.query(Product).filter(Product.featured == True).order_by(Product.id).all()

    @staticmethod
    def get_product(product_id: int, db: Session) -> Product:
        product = db.query(Product).filter(Product.id == product_id).one_or_none()
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def get_product_by_slug(slug: str, db: Session) -> Product:
        product = db.query(Product).filter(Product.slug == slug).one_or_none()
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _check_product(body: ProductRequest, db: Session, product_id: int | None = None):
        existing = db.query(Product).filter(Product.slug == body.slug).first()
        if existing and existing.id != product_id:
            raise ConflictError("A product with this slug already exists")

        if body.category_id is not None:
            if not db.query(Category).filter(Category.id == body.category_id).first():
                raise ValidationError("Category does not exist")

    @staticmethod
    def create_product(body: ProductRequest, db: Session) -> Product:
        CatalogService._check_product(body, db)

        product = Product(**body.model_dump())
        db.add(product)
        db.commit()
        db.refresh(product)

        logger.info("Product created", extra={"product_id": product.id, "slug": product.slug})
        return product

    @staticmethod
    def update_product(product_id: int, body: ProductRequest, db: Session) -> Product:
        product = CatalogService.get_product(product_id, db)
        CatalogService._check_product(body, db, product_id=product.id)

        for field, value in body.model_dump().items():
            setattr(product, field, value)
        db.commit()
        db.refresh(product)

        logger.info("Product updated", extra={"product_id": product.id})
        return product

    @staticmethod
    def delete_product(product_id: int, db: Session):
        """Cart lines holding the product go with it; order snapshots are untouched."""
        product = CatalogService.get_product(product_id, db)
        db.delete(product)
        db.commit()
        logger.info("Product deleted", extra={"product_id": product_id})

    @staticmethod
    def list_categories(db: Session) -> list[Category]:
        return db.query(Category).order_by(Category.name).all()

    @staticmethod
    def get_category(category_id: int, db: Session) -> Category:
        category = db.query(Category).filter(Category.id == category_id).one_or_none()
        if not category:
            raise NotFoundError("Category not found")
        return category

    @staticmethod
    def list_category_products(category_id: int, db: Session) -> list[Product]:
        CatalogService.get_category(category_id, db)
        return db.query(Product).filter(Product.category_id == category_id).order_by(Product.id).all()

    @staticmethod
    def _check_category_slug(slug: str, db: Session, category_id: int | None = None):
        existing = db.query(Category).filter(Category.slug == slug).first()
        if existing and existing.id != category_id:
            raise ConflictError("A category with this slug already exists")

    @staticmethod
    def create_category(body: CategoryRequest, db: Session) -> Category:
        CatalogService._check_category_slug(body.slug, db)

        category = Category(name=body.name, slug=body.slug)
        db.add(category)
        db.commit()
        db.refresh(category)

        logger.info("Category created", extra={"category_id": category.id, "slug": category.slug})
        return category

    @staticmethod
    def update_category(category_id: int, body: CategoryRequest, db: Session) -> Category:
        category = CatalogService.get_category(category_id, db)
        CatalogService._check_category_slug(body.slug, db, category_id=category.id)

        category.name = body.name
        category.slug = body.slug
        db.commit()
        db.refresh(category)
        return category

    @staticmethod
    def delete_category(category_id: int, db: Session):
        """Products in the category are kept, uncategorised."""
        category = CatalogService.get_category(category_id, db)
        db.delete(category)
        db.commit()
        logger.info("Category deleted", extra={"category_id": category_id})
