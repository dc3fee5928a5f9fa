"""Controllers behind the product edit and create forms.

The edit form is a small state machine::

    LOADING --load--> EDITING --request_delete--> CONFIRMING_DELETE
                        ^  |                          |        |
                        |  +--submit (stays)          |        +--confirm_delete--> DELETED
                        +------------cancel_delete----+

Submits are validated before anything goes over the wire. Any non-success
outcome of a request shows the generic error notification and runs none of
the success side effects.
"""

from enum import Enum
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

import httpx
from loguru import logger
from pydantic import ValidationError

from catalog.client.cache import ReadCache
from catalog.client.services import ProductService, RequestResult
from catalog.models import Product, ProductWrite

PRODUCT_ENTITY = "product"
PRODUCT_LIST_PATH = "/products"

FORM_FIELDS = ("category", "product_name", "product_spec", "price")

FIELD_MESSAGES = {
    "category": "Category minimal 2 Character",
    "product_name": "Product name minimal 10 Character",
    "product_spec": "Product spesifikasi minimal 10 Character",
    "price": "Harga minimal 2 Character",
}

INFO_TITLE = "Info"
ERROR_TITLE = "Error"
UPDATED_MESSAGE = "Product Berhasil diupdate!"
DELETED_MESSAGE = "Product Berhasil dihapus!"
CREATED_MESSAGE = "Product Berhasil ditambahkan!"
FAILED_MESSAGE = "Terjadi kesalahan, silakan coba lagi."
NOT_FOUND_MESSAGE = "Product tidak ditemukan."


class Navigator(Protocol):
    def push(self, path: str) -> None: ...

    def refresh(self) -> None: ...


class Notifier(Protocol):
    def toast(self, title: str, description: str) -> None: ...


class FormState(str, Enum):
    LOADING = "loading"
    EDITING = "editing"
    CONFIRMING_DELETE = "confirming_delete"
    DELETED = "deleted"


class FormStateError(RuntimeError):
    """An operation was attempted from a state that does not allow it."""

    def __init__(self, operation: str, state: FormState) -> None:
        super().__init__(f"Cannot {operation} while the form is {state.value}")
        self.operation = operation
        self.state = state


def validate_product(values: Mapping[str, Any]) -> Tuple[Optional[ProductWrite], Dict[str, str]]:
    """Check form values, returning the parsed product or per-field messages."""
    try:
        return ProductWrite.model_validate({field: values.get(field) for field in FORM_FIELDS}), {}
    except ValidationError as e:
        errors = {}
        for err in e.errors():
            field = err["loc"][0] if err["loc"] else None
            if field in FIELD_MESSAGES:
                errors.setdefault(field, FIELD_MESSAGES[field])
        return None, errors


def product_id_from_path(path: str) -> int:
    """``/products/42`` -> ``42``."""
    prefix = PRODUCT_LIST_PATH + "/"
    if not path.startswith(prefix):
        raise ValueError(f"Not a product page: {path!r}")
    return int(path[len(prefix):].strip("/"))


class _BaseForm:
    def __init__(
        self,
        service: ProductService,
        navigator: Navigator,
        notifier: Notifier,
    ) -> None:
        self.service = service
        self.navigator = navigator
        self.notifier = notifier
        self.values: Dict[str, str] = {field: "" for field in FORM_FIELDS}
        self.field_errors: Dict[str, str] = {}

    def set_value(self, field: str, value: str) -> None:
        """Change a field. An existing message stays until the value is valid."""
        if field not in FORM_FIELDS:
            raise KeyError(field)
        self.values[field] = value
        if field in self.field_errors:
            _, errors = validate_product(self.values)
            if field not in errors:
                del self.field_errors[field]

    def _validate(self) -> Optional[ProductWrite]:
        data, errors = validate_product(self.values)
        self.field_errors = errors
        return data

    def _report_failure(self, action: str, result: RequestResult) -> None:
        logger.warning(
            f"{action} failed: outcome={result.outcome.value} "
            f"status={result.status_code} error={result.error}"
        )
        self.notifier.toast(ERROR_TITLE, FAILED_MESSAGE)

    def _leave_to_list(self, message: str) -> None:
        self.notifier.toast(INFO_TITLE, message)
        self.navigator.push(PRODUCT_LIST_PATH)
        self.navigator.refresh()


class ProductFormController(_BaseForm):
    """Edit/delete form for one product."""

    def __init__(
        self,
        product_id: int,
        service: ProductService,
        cache: ReadCache,
        navigator: Navigator,
        notifier: Notifier,
    ) -> None:
        super().__init__(service, navigator, notifier)
        self.product_id = product_id
        self.cache = cache
        self.state = FormState.LOADING
        self.product: Optional[Product] = None

    @classmethod
    def from_path(cls, path: str, *args, **kwargs) -> "ProductFormController":
        return cls(product_id_from_path(path), *args, **kwargs)

    @property
    def dialog_open(self) -> bool:
        return self.state is FormState.CONFIRMING_DELETE

    def _require(self, operation: str, *states: FormState) -> None:
        if self.state not in states:
            raise FormStateError(operation, self.state)

    async def load(self) -> Optional[Product]:
        self._require("load", FormState.LOADING)
        try:
            product = await self.cache.fetch(
                PRODUCT_ENTITY,
                self.product_id,
                lambda: self.service.get_product(self.product_id),
            )
        except httpx.HTTPError as e:
            logger.error(f"Loading product {self.product_id} failed: {e!r}")
            self.notifier.toast(ERROR_TITLE, FAILED_MESSAGE)
            return None

        if product is None:
            self.notifier.toast(ERROR_TITLE, NOT_FOUND_MESSAGE)
            return None

        self.product = product
        self.values = {field: getattr(product, field) for field in FORM_FIELDS}
        self.field_errors = {}
        self.state = FormState.EDITING
        return product

    async def submit(self) -> bool:
        self._require("submit", FormState.EDITING)
        data = self._validate()
        if data is None:
            return False

        result = await self.service.update_product(self.product_id, data.model_dump())
        if not result.ok:
            self._report_failure(f"Update of product {self.product_id}", result)
            return False

        self._leave_to_list(UPDATED_MESSAGE)
        self.cache.invalidate(PRODUCT_ENTITY, self.product_id)
        return True

    def request_delete(self) -> None:
        self._require("request delete", FormState.EDITING)
        self.state = FormState.CONFIRMING_DELETE

    def cancel_delete(self) -> None:
        self._require("cancel delete", FormState.CONFIRMING_DELETE)
        self.state = FormState.EDITING

    async def confirm_delete(self) -> bool:
        self._require("confirm delete", FormState.CONFIRMING_DELETE)
        result = await self.service.delete_product(self.product_id)
        if not result.ok:
            self._report_failure(f"Delete of product {self.product_id}", result)
            return False

        self.state = FormState.DELETED
        self._leave_to_list(DELETED_MESSAGE)
        self.cache.invalidate(PRODUCT_ENTITY, self.product_id)
        return True


class ProductCreateController(_BaseForm):
    """Form for adding a new product."""

    async def submit(self) -> bool:
        data = self._validate()
        if data is None:
            return False

        result = await self.service.insert_product(data.model_dump())
        if not result.ok:
            self._report_failure("Create of product", result)
            return False

        self._leave_to_list(CREATED_MESSAGE)
        return True
