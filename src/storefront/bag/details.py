"""Shopping bag detail resolution — display data for bag lines.

The bag stores ids and quantities only; this module joins them against the
catalogue for one locale. Lines whose product is missing or soft-deleted, or
whose volume is not offered in the resolved or fallback locale, are left out
of the result. The bag itself is not modified, so a line reappears once its
product is restored.
"""

from dataclasses import dataclass, field

from storefront.bag.bag import as_line
from storefront.catalogue import reads
from storefront.locale import localized, resolve_db_locale


@dataclass(frozen=True)
class BagItemDetails:
    product_id: str
    product_slug: str
    product_name: str
    product_subtitle: str  # category name
    product_image: str | None
    volume_id: int
    volume_display: str
    quantity: int
    price: float

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)


@dataclass(frozen=True)
class SampleOption:
    value: str  # product slug
    label: str


@dataclass(frozen=True)
class BagView:
    items: list[BagItemDetails] = field(default_factory=list)
    samples: list[SampleOption] = field(default_factory=list)

    @property
    def subtotal(self) -> float:
        return round(sum(item.line_total for item in self.items), 2)


def get_shopping_bag_items(items, locale) -> list[BagItemDetails]:
    """Resolve bag lines to display records, preserving input order."""
    lines = [line for line in (as_line(item) for item in items or []) if line is not None]
    if not lines:
        return []

    products = {str(p.id): p for p in reads.find_products_by_ids(line.product_id for line in lines)}
    context = reads.load_context(products.values())

    details = []
    for line in lines:
        product = products.get(line.product_id)
        if product is None:
            continue
        resolved = reads.resolve_line(product, line.volume_id, locale, context)
        if resolved is None:
            continue
        details.append(
            BagItemDetails(
                product_id=resolved.product_id,
                product_slug=resolved.product_slug,
                product_name=resolved.product_name,
                product_subtitle=resolved.category_name,
                product_image=resolved.product_image,
                volume_id=resolved.volume_id,
                volume_display=resolved.volume_display,
                quantity=line.quantity,
                price=resolved.price,
            )
        )
    return details


def get_available_products_for_sample(locale) -> list[SampleOption]:
    """All non-deleted products as free-sample choices, ordered by slug."""
    db_locale = resolve_db_locale(locale)
    products = sorted(reads.all_products(), key=lambda p: p.slug)
    return [
        SampleOption(value=p.slug, label=localized(p.translations, db_locale, "name", p.slug)) for p in products
    ]


def get_bag_view(items, locale) -> BagView:
    """Bag details and sample choices for one render of the bag."""
    return BagView(
        items=get_shopping_bag_items(items, locale),
        samples=get_available_products_for_sample(locale),
    )
