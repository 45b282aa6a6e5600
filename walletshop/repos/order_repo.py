# walletshop/repos/order_repo.py
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite

from walletshop.data.models.order import OrderModel, ORDER_STATUS_PENDING
from walletshop.data.models.order_line import OrderLineModel

# INSERT ... ON CONFLICT DO NOTHING per dialekt
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class OrderRepo:
    """
    Repo nie commituje samo - serwis trzyma cala transakcje
    i wola commit/rollback na koncu.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_order_by_wallet(self, wallet_code: str, for_update: bool = False) -> OrderModel | None:
        stmt = select(OrderModel).where(OrderModel.wallet_code == wallet_code)
        if for_update:
            # SELECT ... FOR UPDATE, kolejne upserty tego walleta czekaja na commit
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(stmt).scalar_one_or_none()

    def ensure_order(self, wallet_code: str, buyer_ip: str | None) -> bool:
        """
        Wiersz zamowienia walleta musi istniec przed FOR UPDATE,
        inaczej pierwszy zapis walleta nie ma czego zablokowac.
        True jesli wiersz zostal wlasnie utworzony.
        """
        insert = _UPSERT_INSERTS[self.db.get_bind().dialect.name]
        stmt = (
            insert(OrderModel)
            .values(wallet_code=wallet_code, status=ORDER_STATUS_PENDING, buyer_ip=buyer_ip or None)
            .on_conflict_do_nothing(index_elements=["wallet_code"])
        )
        return self.db.execute(stmt).rowcount == 1

    def replace_lines(self, order: OrderModel, lines: List[OrderLineModel]) -> OrderModel:
        # delete-orphan usuwa stare linie przy flushu, nowe dostaja nowe id
        order.lines = lines
        self.db.flush()
        return order

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
