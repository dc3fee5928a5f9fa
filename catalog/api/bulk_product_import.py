import time
import zipfile

import pandas as pd
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from loguru import logger
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from catalog.db import get_session
from catalog.models import Product, ProductWrite
from catalog.schemas import BulkImportResponse, RejectedRow

router = APIRouter()


def read_upload(file: UploadFile) -> pd.DataFrame:
    filename = (file.filename or "").lower()

    # Every column is text in the catalog, keep "0199" from becoming 199
    try:
        if filename.endswith(".xlsx"):
            return pd.read_excel(file.file, dtype=str, engine="openpyxl")
        if filename.endswith(".csv"):
            return pd.read_csv(file.file, dtype=str)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, ValueError,
            zipfile.BadZipFile, InvalidFileException) as e:
        logger.warning(f"Unreadable upload {file.filename!r}: {e!r}")
        raise HTTPException(
            status_code=400,
            detail=f"Could not read {file.filename}: file is empty or corrupt.",
        )

    raise HTTPException(
        status_code=400,
        detail="Uploaded file can be of .csv or .xlsx type only!!",
    )


def describe_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )


@router.post(
    "/bulk-product-import",
    response_model=BulkImportResponse,
    summary="Bulk upload products from CSV or Excel",
)
async def bulk_product_import(
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
):
    start = time.perf_counter()

    df = read_upload(file)
    df = df.where(pd.notna(df), None)

    products = []
    rejected = []
    # Row numbers count the header line, matching what a spreadsheet shows
    for row_number, record in enumerate(df.to_dict(orient="records"), start=2):
        try:
            data = ProductWrite.model_validate(record)
        except ValidationError as e:
            rejected.append(RejectedRow(row=row_number, reason=describe_errors(e)))
            continue
        products.append(Product.model_validate(data))

    try:
        session.add_all(products)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Bulk import failed: {e}")
        return BulkImportResponse(
            status="error",
            message=f"Insert failed: {e}",
            timeTaken_ms=round((time.perf_counter() - start) * 1000, 2),
        )

    logger.info(f"Bulk import: {len(products)} imported, {len(rejected)} rejected")
    end = time.perf_counter()
    return BulkImportResponse(
        status="success",
        imported_count=len(products),
        rejected=rejected,
        timeTaken_ms=round((end - start) * 1000, 2),
    )
