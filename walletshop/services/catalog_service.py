# walletshop/services/catalog_service.py
from decimal import Decimal
from typing import Dict, Iterable
from sqlalchemy.orm import Session

from walletshop.domain.errors import CatalogMismatchError
from walletshop.repos.catalog_repo import CatalogRepo
from walletshop.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """Zaufane ceny z katalogu, tylko aktywne produkty."""

    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    def resolve_prices(self, item_ids: Iterable[int]) -> Dict[int, Decimal]:
        requested = set(item_ids)
        items = self.repo.get_active_items(requested)

        # nieznany i nieaktywny produkt wygladaja tak samo dla wolajacego
        if len(items) != len(requested):
            missing = requested - {i.id for i in items}
            logger.info(f"Catalog mismatch, unresolved items: {sorted(missing)}")
            raise CatalogMismatchError()

        return {i.id: Decimal(i.price) for i in items}
