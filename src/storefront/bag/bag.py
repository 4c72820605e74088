"""Shopping bag — plain data and pure mutation functions.

The bag only carries identifiers and quantities. Names, images and prices are
always re-resolved from the catalogue, so a bag can never hold stale or
tampered pricing. Every mutation returns a new ``ShoppingBag``; the store in
``storefront.bag.store`` decides where the result lives.
"""

import json
from dataclasses import dataclass, replace

MIN_QUANTITY = 1
MAX_QUANTITY = 10

STORAGE_KEY = "ampul-shopping-bag"


@dataclass(frozen=True)
class BagLine:
    product_id: str
    volume_id: int
    quantity: int

    def matches(self, product_id, volume_id) -> bool:
        return self.product_id == str(product_id) and self.volume_id == int(volume_id)

    def to_dict(self) -> dict:
        return {"productId": self.product_id, "volumeId": self.volume_id, "quantity": self.quantity}


@dataclass(frozen=True)
class ShoppingBag:
    items: tuple[BagLine, ...] = ()
    selected_sample: str | None = None


@dataclass(frozen=True)
class AddedProduct:
    """Notice emitted by every ``add_item`` call, clamped or not."""

    product_id: str
    volume_id: int
    is_max_quantity_exceeded: bool = False


def clamp_quantity(quantity: int) -> int:
    return max(MIN_QUANTITY, min(MAX_QUANTITY, int(quantity)))


def find_line(bag: ShoppingBag, product_id, volume_id) -> BagLine | None:
    return next((line for line in bag.items if line.matches(product_id, volume_id)), None)


def add_item(bag: ShoppingBag, product_id, volume_id, quantity=1) -> tuple[ShoppingBag, AddedProduct]:
    """Add ``quantity`` of a product volume, merging with an identical line.

    The stored quantity never exceeds ``MAX_QUANTITY``; the returned notice
    reports whether the unclamped total would have.
    """
    product_id, volume_id, quantity = str(product_id), int(volume_id), int(quantity)
    existing = find_line(bag, product_id, volume_id)

    if existing is not None:
        requested = existing.quantity + quantity
        items = tuple(
            replace(line, quantity=clamp_quantity(requested)) if line is existing else line for line in bag.items
        )
    else:
        requested = quantity
        items = bag.items + (BagLine(product_id, volume_id, clamp_quantity(requested)),)

    notice = AddedProduct(
        product_id=product_id,
        volume_id=volume_id,
        is_max_quantity_exceeded=requested > MAX_QUANTITY,
    )
    return replace(bag, items=items), notice


def remove_item(bag: ShoppingBag, product_id, volume_id) -> ShoppingBag:
    items = tuple(line for line in bag.items if not line.matches(product_id, volume_id))
    return replace(bag, items=items)


def update_quantity(bag: ShoppingBag, product_id, volume_id, quantity) -> ShoppingBag:
    """Replace a line's quantity; zero or less removes the line."""
    if int(quantity) <= 0:
        return remove_item(bag, product_id, volume_id)

    items = tuple(
        replace(line, quantity=clamp_quantity(quantity)) if line.matches(product_id, volume_id) else line
        for line in bag.items
    )
    return replace(bag, items=items)


def set_selected_sample(bag: ShoppingBag, product_slug: str | None) -> ShoppingBag:
    return replace(bag, selected_sample=product_slug or None)


def clear_bag(bag: ShoppingBag) -> ShoppingBag:  # noqa: ARG001
    return ShoppingBag()


def total_items(bag: ShoppingBag) -> int:
    """Sum of quantities, not the number of lines."""
    return sum(line.quantity for line in bag.items)


# ---------------------------------------------------------------------------
# Persistence format
# ---------------------------------------------------------------------------
def serialize(bag: ShoppingBag) -> str:
    return json.dumps(
        {
            "items": [line.to_dict() for line in bag.items],
            "selectedSample": bag.selected_sample,
        }
    )


def deserialize(raw: str) -> ShoppingBag:
    """Parse a stored bag.

    Raises ``ValueError`` when the payload is not a bag at all. Individual
    malformed lines are dropped, stored quantities are clamped and duplicate
    lines are merged.
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Stored shopping bag must be a JSON object")

    raw_items = data.get("items") or []
    if not isinstance(raw_items, list):
        raise ValueError("Stored shopping bag items must be a list")

    bag = ShoppingBag()
    for entry in raw_items:
        try:
            product_id = str(entry["productId"])
            volume_id = int(entry["volumeId"])
            quantity = int(entry["quantity"])
        except (KeyError, TypeError, ValueError, OverflowError):
            continue
        if not product_id or quantity <= 0:
            continue
        bag, _ = add_item(bag, product_id, volume_id, quantity)

    sample = data.get("selectedSample")
    return set_selected_sample(bag, sample if isinstance(sample, str) else None)


def as_line(item) -> BagLine | None:
    """Coerce a ``BagLine`` or a snake/camel-case mapping into a clamped line.

    Returns ``None`` for entries that cannot name a product, volume and a
    positive quantity.
    """
    if isinstance(item, BagLine):
        return item
    try:
        product_id = item.get("product_id", item.get("productId"))
        volume_id = int(item.get("volume_id", item.get("volumeId")))
        quantity = int(item.get("quantity", MIN_QUANTITY))
    except (AttributeError, TypeError, ValueError, OverflowError):
        return None
    if not product_id or quantity <= 0:
        return None
    return BagLine(str(product_id), volume_id, clamp_quantity(quantity))
