# walletshop/services/pricing_service.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Sequence

from walletshop.domain.errors import InvalidQuantityError, InvalidTotalError
from walletshop.services.catalog_service import CatalogService


@dataclass(frozen=True)
class PricedLine:
    """
    Linia po wycenie. Tylko te pola trafiaja do bazy -
    nic z wejscia klienta poza item_id i quantity.
    """

    item_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class PricingService:
    def __init__(self, catalog: CatalogService):
        self.catalog = catalog

    def price_lines(self, lines: Sequence[Any]) -> List[PricedLine]:
        """
        Wycenia linie wg katalogu, zachowujac kolejnosc wejscia.

        Linie to obiekty z atrybutami item_id i quantity (np. OrderLineIn).
        Jedno zapytanie do katalogu dla wszystkich unikalnych produktow.
        """
        prices = self.catalog.resolve_prices({line.item_id for line in lines})

        priced = []
        for line in lines:
            if not _is_positive_int(line.quantity):
                raise InvalidQuantityError(line.item_id)

            unit_price = prices[line.item_id]
            total_price = unit_price * line.quantity

            # zerowa/ujemna cena w katalogu nie moze dojsc do bazy
            if not total_price > 0:
                raise InvalidTotalError(line.item_id)

            priced.append(
                PricedLine(
                    item_id=line.item_id,
                    quantity=line.quantity,
                    unit_price=unit_price,
                    total_price=total_price,
                )
            )
        return priced
