import random

import pandas as pd
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from typing import Callable, Dict, Literal, Tuple
from faker import Faker
from io import BytesIO

router = APIRouter()
fake = Faker()

MAX_ROWS = 10000000
COLUMNS = ["category", "product_name", "product_spec", "price"]
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def dataframe_to_csv(df: pd.DataFrame) -> bytes:
    return df.to_csv(index=False).encode("utf-8")


def dataframe_to_xlsx(df: pd.DataFrame) -> bytes:
    buffer = BytesIO()
    df.to_excel(buffer, index=False, sheet_name="Products", engine="openpyxl")
    return buffer.getvalue()


# format -> (file extension, media type, serializer)
EXPORT_FORMATS: Dict[str, Tuple[str, str, Callable[[pd.DataFrame], bytes]]] = {
    "csv": ("csv", "text/csv", dataframe_to_csv),
    "excel": ("xlsx", XLSX_MEDIA_TYPE, dataframe_to_xlsx),
}


@router.get(
    "/generate-dummy-product-dataset",
    summary="Generate and download a dummy product dataset",
    response_description="A CSV or Excel file of products that the bulk import accepts.",
)
async def generate_dataset(
    rows: int = 100,
    format: Literal["csv", "excel"] = "csv",
):
    if not 0 < rows <= MAX_ROWS:
        raise HTTPException(
            status_code=400,
            detail=f"The 'rows' parameter must be a positive integer, max {MAX_ROWS}.",
        )

    extension, media_type, serialize = EXPORT_FORMATS[format]
    return Response(
        content=serialize(generate_product_data(rows)),
        media_type=media_type,
        headers={
            "Content-Disposition": f"attachment; filename=dummy_products_{rows}.{extension}",
        },
    )


def generate_product_data(num_rows: int) -> pd.DataFrame:
    """Generates a Pandas DataFrame of dummy catalog products.

    Every generated row satisfies the minimum lengths of the product form,
    so the output can be fed straight back into the bulk import.
    """
    categories = ["Laptop", "Phone", "Tablet", "Monitor"]
    brands = ["Lenovo", "Samsung", "Xiaomi", "Asus"]
    series = ["Pro", "Max", "Ultra", "Lite"]

    data = []
    for _ in range(num_rows):
        cur_category = random.choice(categories)
        product_name = f"{random.choice(brands)} {cur_category} {random.choice(series)}"

        data.append(
            {
                "category": cur_category,
                "product_name": product_name,
                "product_spec": fake.sentence(nb_words=6, variable_nb_words=False),
                "price": str(random.randint(10, 2500) * 1000),
            }
        )

    return pd.DataFrame(data, columns=COLUMNS)
