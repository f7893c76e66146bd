"""
Product catalog management.

Product codes identify inventory items on quotes and invoices, so a code
may belong to only one product. The check runs before any write; a
duplicate never reaches the backend.
"""

import logging
import uuid
from typing import Optional

from pydantic import BaseModel

from fieldservice.schemas.state_schema import AppState, Product
from fieldservice.services.backend import BackendError, BackendService
from fieldservice.utils import is_blank

logger = logging.getLogger(__name__)


class DuplicateProductCodeError(ValueError):
    """Raised when a product code is already used by another product."""

    def __init__(self, code: str) -> None:
        super().__init__(f"A product with code '{code}' already exists.")
        self.code = code


class ProductInput(BaseModel):
    """Fields an operator enters for a new or edited product."""
    code: str
    name: str
    purchase_price: float = 0.0
    sell_price1: float = 0.0
    sell_price2: float = 0.0
    sell_price3: float = 0.0
    stock: int = 0
    initial_stock: Optional[int] = None


def _code_key(code: str) -> str:
    return code.strip().lower()


def find_duplicate_code(
    products: list[Product], code: str, exclude_id: Optional[str] = None
) -> Optional[Product]:
    """Return the product already using ``code`` (trimmed, case-insensitive)."""
    key = _code_key(code)
    for product in products:
        if product.id != exclude_id and _code_key(product.code) == key:
            return product
    return None


def search_products(products: list[Product], query: str) -> list[Product]:
    """Case-insensitive substring match on code or name."""
    if is_blank(query):
        return list(products)
    needle = query.strip().lower()
    return [
        p for p in products
        if needle in p.code.lower() or needle in p.name.lower()
    ]


class ProductCatalog:
    """Add, edit, and remove products in the shared state."""

    def __init__(self, backend: BackendService) -> None:
        self._backend = backend

    async def _load(self) -> AppState:
        state = await self._backend.get_initial_state()
        if state is None:
            raise BackendError("App state document does not exist")
        return state

    @staticmethod
    def _validate(product_in: ProductInput) -> None:
        if is_blank(product_in.code) or is_blank(product_in.name):
            raise ValueError("Product code and name are required.")

    async def add_product(self, product_in: ProductInput) -> Product:
        """
        Create a product.

        Raises:
            DuplicateProductCodeError: If the code is already taken.
        """
        self._validate(product_in)
        state = await self._load()
        if find_duplicate_code(state.products, product_in.code):
            raise DuplicateProductCodeError(product_in.code.strip())

        data = product_in.model_dump()
        data["code"] = product_in.code.strip()
        if data["initial_stock"] is None:
            data["initial_stock"] = product_in.stock
        product = Product(id=f"prod_{uuid.uuid4().hex[:10]}", **data)

        await self._backend.save_state(
            state.model_copy(update={"products": [*state.products, product]})
        )
        logger.info("Product %s created (%s)", product.code, product.name)
        return product

    async def update_product(self, product_id: str, product_in: ProductInput) -> Product:
        """
        Edit a product; its own code does not count as a duplicate.

        Raises:
            KeyError: If the product does not exist.
            DuplicateProductCodeError: If another product has the code.
        """
        self._validate(product_in)
        state = await self._load()
        existing = next((p for p in state.products if p.id == product_id), None)
        if existing is None:
            raise KeyError(f"Product {product_id} not found")
        if find_duplicate_code(state.products, product_in.code, exclude_id=product_id):
            raise DuplicateProductCodeError(product_in.code.strip())

        changes = product_in.model_dump(exclude_none=True)
        changes["code"] = product_in.code.strip()
        updated = existing.model_copy(update=changes)
        await self._backend.save_state(state.model_copy(update={
            "products": [updated if p.id == product_id else p for p in state.products],
        }))
        logger.info("Product %s updated", product_id)
        return updated

    async def delete_product(self, product_id: str) -> None:
        state = await self._load()
        remaining = [p for p in state.products if p.id != product_id]
        if len(remaining) == len(state.products):
            raise KeyError(f"Product {product_id} not found")
        await self._backend.save_state(state.model_copy(update={"products": remaining}))
        logger.info("Product %s deleted", product_id)
