import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from loguru import logger
from sqlmodel import Session, func, or_, select

from catalog.db import get_session
from catalog.models import Product, ProductWrite
from catalog.schemas import PaginatedResponse

router = APIRouter(prefix="/api/products", tags=["products"])


def get_product_or_404(session: Session, product_id: int) -> Product:
    product = session.get(Product, product_id)
    if product is None:
        raise HTTPException(
            status_code=404,
            detail=f"Product {product_id} not found.",
        )
    return product


@router.get("/get-all", response_model=List[Product], summary="List every product")
async def get_all_products(session: Session = Depends(get_session)):
    return session.exec(select(Product)).all()


@router.get(
    "/get-one/{product_id}",
    response_model=List[Product],
    summary="Get a single product",
    response_description="An array holding the product, or an empty array.",
)
async def get_one_product(product_id: int, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    return [product] if product is not None else []


@router.post(
    "/post",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
)
async def create_product(data: ProductWrite, session: Session = Depends(get_session)):
    product = Product.model_validate(data)
    session.add(product)
    session.commit()
    session.refresh(product)
    logger.info(f"Created product id={product.id}")
    return product


@router.put("/update/{product_id}", response_model=Product, summary="Replace a product")
async def update_product(
    product_id: int,
    data: ProductWrite,
    session: Session = Depends(get_session),
):
    product = get_product_or_404(session, product_id)
    product.sqlmodel_update(data.model_dump())
    session.add(product)
    session.commit()
    session.refresh(product)
    logger.info(f"Updated product id={product_id}")
    return product


@router.delete(
    "/delete/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
)
async def delete_product(product_id: int, session: Session = Depends(get_session)):
    product = get_product_or_404(session, product_id)
    session.delete(product)
    session.commit()
    logger.info(f"Deleted product id={product_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/get-list",
    response_model=PaginatedResponse,
    summary="Get a paginated, searchable, and filterable list of products",
)
async def get_product_list(
    # Pagination Parameters
    page: int = Query(1, ge=1, description="Page number to retrieve."),
    page_size: int = Query(10, ge=1, le=100, description="Number of items per page."),

    # Search and Filtration Parameters
    search: Optional[str] = Query(None, description="Search term for product name or spec."),
    category: Optional[str] = Query(None, description="Filter by category (case-insensitive)."),
    session: Session = Depends(get_session),
):
    start = time.perf_counter()

    conditions = []
    if search:
        conditions.append(
            or_(
                Product.product_name.ilike(f"%{search}%"),
                Product.product_spec.ilike(f"%{search}%"),
            )
        )
    if category:
        conditions.append(Product.category.ilike(f"%{category}%"))

    count_query = select(func.count()).select_from(Product)
    query = select(Product)
    for condition in conditions:
        count_query = count_query.where(condition)
        query = query.where(condition)

    total_items = session.exec(count_query).one()
    total_pages = (total_items + page_size - 1) // page_size if total_items > 0 else 1

    # Check if requested page exists
    if page > total_pages and total_items > 0:
        raise HTTPException(
            status_code=404,
            detail=f"Page {page} does not exist. Last page is {total_pages}.",
        )

    query = (
        query
        .order_by(Product.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    paginated_products = session.exec(query).all()

    end = time.perf_counter()

    return PaginatedResponse(
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
        time=round((end - start) * 1000, 2),
        data=paginated_products,
    )
