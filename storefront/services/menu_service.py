"""
Menu service
Menu item CRUD; writes are admin-only at the API layer
"""

from typing import Any, Dict, List, Optional

from ..core.database import DocumentStore, utcnow
from ..core.exceptions import NotFoundError
from ..models.menu import MenuItem

MENU = "menu"


class MenuService:

    def __init__(self, store: DocumentStore):
        self.db = store

    def list_items(self, available_only: bool = False, category: Optional[str] = None) -> List[MenuItem]:
        where: Dict[str, Any] = {}
        if available_only:
            where["available"] = True
        if category:
            where["category"] = category
        docs = self.db.query(MENU, where or None, order_by="name")
        return [MenuItem.from_document(d) for d in docs]

    def get_item(self, item_id: str) -> MenuItem:
        item = MenuItem.from_document(self.db.get(MENU, item_id))
        if item is None:
            raise NotFoundError("Menu item not found", details={"menu_item_id": item_id})
        return item

    def create_item(self, data: Dict[str, Any], actor_id: str) -> MenuItem:
        now = utcnow()
        item = MenuItem(**data, created_at=now, updated_at=now)
        item_id = self.db.add(MENU, item.to_document())
        self.db.log("menu_create", actor_id=actor_id, detail={"menu_item_id": item_id, "name": item.name})
        return self.get_item(item_id)

    def update_item(self, item_id: str, changes: Dict[str, Any], actor_id: str) -> MenuItem:
        current = self.get_item(item_id)
        merged = current.model_copy(update={**changes, "updated_at": utcnow()})
        # re-validate so a bad price is rejected before the write
        item = MenuItem.model_validate(merged.model_dump())
        self.db.set(MENU, item_id, item.to_document())
        self.db.log("menu_update", actor_id=actor_id,
                    detail={"menu_item_id": item_id, "fields": sorted(changes)})
        return self.get_item(item_id)

    def delete_item(self, item_id: str, actor_id: str):
        if not self.db.delete(MENU, item_id):
            raise NotFoundError("Menu item not found", details={"menu_item_id": item_id})
        self.db.log("menu_delete", actor_id=actor_id, detail={"menu_item_id": item_id})
