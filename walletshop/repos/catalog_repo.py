# walletshop/repos/catalog_repo.py
from typing import Iterable, List
from sqlalchemy.orm import Session
from sqlalchemy import select

from walletshop.data.models.item import ItemModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_active_items(self, item_ids: Iterable[int]) -> List[ItemModel]:
        ids = list(item_ids)
        if not ids:
            return []
        stmt = select(ItemModel).where(ItemModel.id.in_(ids), ItemModel.active.is_(True))
        return list(self.db.execute(stmt).scalars().all())

    def has_items(self) -> bool:
        return self.db.execute(select(ItemModel.id).limit(1)).first() is not None

    def add_item(self, item: ItemModel) -> ItemModel:
        self.db.add(item)
        return item
