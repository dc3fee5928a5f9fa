"""HTTP helpers the product forms use to talk to the product API.

Mutations return a :class:`RequestResult` instead of raising, so a caller
can tell a transport failure from a rejected request and from a success.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional

import httpx
from loguru import logger

from catalog.config import get_settings
from catalog.models import Product


class RequestOutcome(str, Enum):
    SUCCESS = "success"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"


@dataclass(frozen=True)
class RequestResult:
    outcome: RequestOutcome
    response: Optional[httpx.Response] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is RequestOutcome.SUCCESS

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None


class ProductService:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        settings = get_settings()
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ProductService":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _send(self, method: str, url: str, json: Any = None) -> RequestResult:
        try:
            client = await self._get_client()
            response = await client.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e!r}")
            return RequestResult(RequestOutcome.NETWORK_ERROR, error=str(e) or repr(e))

        if not response.is_success:
            logger.warning(f"{method} {url} rejected: status={response.status_code}")
            return RequestResult(RequestOutcome.HTTP_ERROR, response=response)

        return RequestResult(RequestOutcome.SUCCESS, response=response)

    async def insert_product(self, data: Mapping[str, Any]) -> RequestResult:
        return await self._send("POST", "/api/products/post", json=dict(data))

    async def update_product(self, product_id: int, data: Mapping[str, Any]) -> RequestResult:
        return await self._send("PUT", f"/api/products/update/{product_id}", json=dict(data))

    async def delete_product(self, product_id: int) -> RequestResult:
        return await self._send("DELETE", f"/api/products/delete/{product_id}")

    async def get_all_products(self) -> List[Product]:
        client = await self._get_client()
        response = await client.get("/api/products/get-all")
        response.raise_for_status()
        return [Product.model_validate(item) for item in response.json()]

    async def get_product(self, product_id: int) -> Optional[Product]:
        """Fetch one product, ``None`` when the store has no such id.

        The endpoint answers with an array of zero or one product; it is
        unwrapped here so callers never index into it.
        """
        client = await self._get_client()
        response = await client.get(f"/api/products/get-one/{product_id}")
        response.raise_for_status()
        items = response.json()
        if not items:
            return None
        return Product.model_validate(items[0])
