"""Catalog queries."""

from clubsupply.catalog.inventory_item import InventoryItem, ItemStatus
from clubsupply.domain import clubsupply


@clubsupply.repository(part_of=InventoryItem)
class InventoryItemRepository:
    def find_by_name(self, name: str) -> InventoryItem | None:
        return self.query.filter(name=name).all().first

    def list_all(self) -> list[InventoryItem]:
        return self.query.order_by("name").limit(None).all().items

    def list_enabled(self) -> list[InventoryItem]:
        return self.query.filter(status=ItemStatus.ENABLED.value).order_by("name").limit(None).all().items

    def existing_ids(self, ids) -> set[str]:
        """The subset of ``ids`` that still resolve to catalog items."""
        wanted = {str(i) for i in ids if i}
        if not wanted:
            return set()
        found = self.query.filter(id__in=list(wanted)).limit(None).all().items
        return {str(item.id) for item in found}

    def remove(self, item: InventoryItem) -> None:
        """Delete ``item``, flushing any events it has raised first."""
        self.add(item)
        self._dao.delete(item)
