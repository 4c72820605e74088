"""Shopping bag store — owns one bag, persists it, and announces additions.

A ``BagStore`` is created by whoever owns the bag (a UI session, a CLI run, a
test) and handed to the code that needs it; there is no ambient global bag.
Storage is read once by ``load()``; from then on every mutation is written
back. Mutations made before ``load()`` stay in memory only.

"Added to bag" notices are queued in arrival order. ``added_product`` is the
oldest unconsumed notice and ``clear_added_product()`` consumes it, so a quick
double add yields two notices instead of overwriting the first.
"""

from collections import deque
from collections.abc import Callable

from storefront.bag import bag as bag_ops
from storefront.bag.bag import STORAGE_KEY, AddedProduct, BagLine, ShoppingBag
from storefront.bag.storage import BagStorage
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

Listener = Callable[[ShoppingBag], None]


class BagStore:
    def __init__(self, storage: BagStorage, key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key
        self._bag = ShoppingBag()
        self._notices: deque[AddedProduct] = deque()
        self._listeners: list[Listener] = []
        self._loaded = False

    # -------------------------------------------------------------------
    # Loading & persistence
    # -------------------------------------------------------------------
    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self) -> ShoppingBag:
        """Read the stored bag once. Missing or corrupt data yields an empty bag."""
        if self._loaded:
            return self._bag

        try:
            raw = self.storage.get_item(self.key)
            if raw:
                self._bag = bag_ops.deserialize(raw)
        except Exception:
            logger.exception("bag_load_failed", key=self.key)
            self._bag = ShoppingBag()

        self._loaded = True
        self._notify()
        return self._bag

    def _commit(self, new_bag: ShoppingBag) -> None:
        self._bag = new_bag
        if self._loaded:
            try:
                self.storage.set_item(self.key, bag_ops.serialize(new_bag))
            except OSError as exc:
                logger.error("bag_save_failed", key=self.key, error=str(exc))
        self._notify()

    # -------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the bag after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._bag)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def bag(self) -> ShoppingBag:
        return self._bag

    @property
    def items(self) -> tuple[BagLine, ...]:
        return self._bag.items

    @property
    def selected_sample(self) -> str | None:
        return self._bag.selected_sample

    @property
    def total_items(self) -> int:
        return bag_ops.total_items(self._bag)

    @property
    def added_product(self) -> AddedProduct | None:
        return self._notices[0] if self._notices else None

    @property
    def pending_notices(self) -> list[AddedProduct]:
        return list(self._notices)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product_id, volume_id, quantity=1) -> AddedProduct:
        new_bag, notice = bag_ops.add_item(self._bag, product_id, volume_id, quantity)
        self._notices.append(notice)
        self._commit(new_bag)
        return notice

    def remove_item(self, product_id, volume_id) -> None:
        self._commit(bag_ops.remove_item(self._bag, product_id, volume_id))

    def update_quantity(self, product_id, volume_id, quantity) -> None:
        self._commit(bag_ops.update_quantity(self._bag, product_id, volume_id, quantity))

    def set_selected_sample(self, product_slug: str | None) -> None:
        self._commit(bag_ops.set_selected_sample(self._bag, product_slug))

    def clear_added_product(self) -> AddedProduct | None:
        """Consume the oldest pending notice."""
        return self._notices.popleft() if self._notices else None

    def clear_bag(self) -> None:
        self._commit(bag_ops.clear_bag(self._bag))

    def line_items(self) -> list[dict]:
        """Raw ``{product_id, volume_id, quantity}`` lines for checkout."""
        return [
            {"product_id": line.product_id, "volume_id": line.volume_id, "quantity": line.quantity}
            for line in self._bag.items
        ]
