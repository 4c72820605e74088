"""Catalogue read layer — localized display records built from aggregates.

All reads exclude soft-deleted products. Lookups of related data (categories,
collections, volume definitions) are batched per call so a page of products
costs a fixed number of queries.
"""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.taxonomy import Category, Collection
from storefront.catalogue.volume import VolumeSize
from storefront.locale import localized, lookup_locales, pick_translation, resolve_db_locale


@dataclass(frozen=True)
class ResolvedLine:
    """A (product, volume) pair priced and translated for one locale."""

    product_id: str
    product_slug: str
    product_name: str
    category_name: str
    product_image: str | None
    volume_id: int | None  # None for a free sample
    volume_display: str | None
    price: float


@dataclass(frozen=True)
class ProductCard:
    id: str
    slug: str
    name: str
    concept: str
    product_image: str | None
    price: float
    volume_id: int
    volume_display: str
    volume_value: str
    collection_slug: str
    collection_name: str
    tag_slugs: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class OfferingView:
    volume_id: int
    volume_value: str
    volume_display: str
    price: float
    stock: int | None


@dataclass(frozen=True)
class ProductDetail:
    id: str
    slug: str
    name: str
    concept: str
    sensations: str
    category_name: str
    collection_name: str
    product_image: str | None
    offerings: list[OfferingView] = field(default_factory=list)


@dataclass(frozen=True)
class SearchHit:
    slug: str
    name: str
    category_name: str
    product_image: str | None


@dataclass(frozen=True)
class CollectionHit:
    slug: str
    name: str


@dataclass(frozen=True)
class FilterOptions:
    volumes: list[dict]
    collections: list[dict]
    tags: list[str]


@dataclass(frozen=True)
class CatalogueContext:
    """Related records needed to render a batch of products."""

    categories: dict
    collections: dict
    volume_sizes: dict


# ---------------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------------
def find_products_by_ids(product_ids) -> list[Product]:
    ids = sorted({str(pid) for pid in product_ids if pid})
    if not ids:
        return []
    repo = current_domain.repository_for(Product)
    return repo._dao.query.filter(id__in=ids, is_deleted=False).all().items


def find_product_by_slug(slug, include_deleted=False) -> Product | None:
    if not slug:
        return None
    repo = current_domain.repository_for(Product)
    filters = {"slug": slug}
    if not include_deleted:
        filters["is_deleted"] = False
    results = repo._dao.query.filter(**filters).all()
    return results.first


def all_products() -> list[Product]:
    repo = current_domain.repository_for(Product)
    return repo._dao.query.filter(is_deleted=False).all().items


def load_context(products) -> CatalogueContext:
    category_ids = sorted({str(p.category_id) for p in products if p.category_id})
    collection_ids = sorted({str(p.collection_id) for p in products if p.collection_id})
    volume_ids = sorted({v.volume_id for p in products for v in p.volumes})

    categories = {}
    if category_ids:
        found = current_domain.repository_for(Category)._dao.query.filter(id__in=category_ids).all().items
        categories = {str(c.id): c for c in found}

    collections = {}
    if collection_ids:
        found = current_domain.repository_for(Collection)._dao.query.filter(id__in=collection_ids).all().items
        collections = {str(c.id): c for c in found}

    volume_sizes = {}
    if volume_ids:
        found = current_domain.repository_for(VolumeSize)._dao.query.filter(volume_id__in=volume_ids).all().items
        volume_sizes = {v.volume_id: v for v in found}

    return CatalogueContext(categories=categories, collections=collections, volume_sizes=volume_sizes)


# ---------------------------------------------------------------------------
# Shaping
# ---------------------------------------------------------------------------
def _category_name(product, context, db_locale):
    category = context.categories.get(str(product.category_id)) if product.category_id else None
    if category is None:
        return ""
    return localized(category.translations, db_locale, "name", category.slug)


def _collection(product, context, db_locale):
    collection = context.collections.get(str(product.collection_id)) if product.collection_id else None
    if collection is None:
        return "", ""
    return collection.slug, localized(collection.translations, db_locale, "name", collection.slug)


def _volume_labels(volume_id, context, db_locale):
    size = context.volume_sizes.get(volume_id)
    if size is None:
        return str(volume_id), str(volume_id)
    return size.value, localized(size.translations, db_locale, "display_name", size.value)


def resolve_line(product, volume_id, locale, context) -> ResolvedLine | None:
    """Price and translate one bag/order line, or ``None`` if not offered."""
    db_locale = resolve_db_locale(locale)
    offering = product.offering_for(volume_id, lookup_locales(locale))
    if offering is None:
        return None

    _, volume_display = _volume_labels(volume_id, context, db_locale)
    return ResolvedLine(
        product_id=str(product.id),
        product_slug=product.slug,
        product_name=localized(product.translations, db_locale, "name", product.slug),
        category_name=_category_name(product, context, db_locale),
        product_image=product.product_image,
        volume_id=volume_id,
        volume_display=volume_display,
        price=float(offering.price),
    )


def resolve_sample(product, locale, context) -> ResolvedLine | None:
    """Describe a product as a free sample: no volume, no price.

    Unlike priced lines, a sample needs a real translation in the resolved or
    fallback locale.
    """
    db_locale = resolve_db_locale(locale)
    translation = pick_translation(product.translations, db_locale)
    if translation is None:
        return None
    return ResolvedLine(
        product_id=str(product.id),
        product_slug=product.slug,
        product_name=translation.name,
        category_name=_category_name(product, context, db_locale),
        product_image=product.product_image,
        volume_id=None,
        volume_display=None,
        price=0.0,
    )


def _first_offering(product, locale):
    for db_locale in lookup_locales(locale):
        offering = next((v for v in product.volumes if v.locale == db_locale), None)
        if offering is not None:
            return offering
    return product.volumes[0] if product.volumes else None


def _card(product, locale, context) -> ProductCard:
    db_locale = resolve_db_locale(locale)
    offering = _first_offering(product, locale)
    volume_value, volume_display = ("", "")
    if offering is not None:
        volume_value, volume_display = _volume_labels(offering.volume_id, context, db_locale)
    collection_slug, collection_name = _collection(product, context, db_locale)

    return ProductCard(
        id=str(product.id),
        slug=product.slug,
        name=localized(product.translations, db_locale, "name", product.slug),
        concept=localized(product.translations, db_locale, "concept", ""),
        product_image=product.product_image,
        price=float(offering.price) if offering else 0.0,
        volume_id=offering.volume_id if offering else 0,
        volume_display=volume_display,
        volume_value=volume_value,
        collection_slug=collection_slug,
        collection_name=collection_name,
        tag_slugs=product.tag_slugs,
    )


# ---------------------------------------------------------------------------
# Page-level reads
# ---------------------------------------------------------------------------
def list_products(locale, collection_slug=None, tag=None) -> list[ProductCard]:
    """Non-deleted products as display cards, newest first."""
    products = all_products()
    context = load_context(products)
    cards = [_card(p, locale, context) for p in sorted(products, key=_newest_first)]

    if collection_slug:
        cards = [c for c in cards if c.collection_slug == collection_slug]
    if tag:
        cards = [c for c in cards if tag in c.tag_slugs]
    return cards


def _newest_first(product):
    return -(product.created_at.timestamp() if product.created_at else 0.0)


def get_product_detail(slug, locale) -> ProductDetail | None:
    product = find_product_by_slug(slug)
    if product is None:
        return None

    db_locale = resolve_db_locale(locale)
    context = load_context([product])

    offerings = []
    for volume_id in sorted({v.volume_id for v in product.volumes}):
        offering = product.offering_for(volume_id, lookup_locales(locale))
        if offering is None:
            continue
        volume_value, volume_display = _volume_labels(volume_id, context, db_locale)
        offerings.append(
            OfferingView(
                volume_id=volume_id,
                volume_value=volume_value,
                volume_display=volume_display,
                price=float(offering.price),
                stock=offering.stock,
            )
        )

    _, collection_name = _collection(product, context, db_locale)
    return ProductDetail(
        id=str(product.id),
        slug=product.slug,
        name=localized(product.translations, db_locale, "name", product.slug),
        concept=localized(product.translations, db_locale, "concept", ""),
        sensations=localized(product.translations, db_locale, "sensations", ""),
        category_name=_category_name(product, context, db_locale),
        collection_name=collection_name,
        product_image=product.product_image,
        offerings=offerings,
    )


def get_filter_options(locale) -> FilterOptions:
    db_locale = resolve_db_locale(locale)

    sizes = current_domain.repository_for(VolumeSize)._dao.query.all().items
    collections = current_domain.repository_for(Collection)._dao.query.all().items
    tags = sorted({tag for p in all_products() for tag in p.tag_slugs})

    return FilterOptions(
        volumes=[
            {
                "id": s.volume_id,
                "value": s.value,
                "display_name": localized(s.translations, db_locale, "display_name", s.value),
            }
            for s in sorted(sizes, key=lambda s: s.volume_id)
        ],
        collections=[
            {"slug": c.slug, "name": localized(c.translations, db_locale, "name", c.slug)}
            for c in sorted(collections, key=lambda c: c.slug)
        ],
        tags=tags,
    )


def search_products(query, locale, limit=10) -> list[SearchHit]:
    """Case-insensitive substring match on the product name in the request locale."""
    needle = (query or "").strip().lower()
    if not needle:
        return []

    db_locale = resolve_db_locale(locale)
    products = sorted(all_products(), key=lambda p: p.slug)
    matches = []
    for product in products:
        translation = pick_translation(product.translations, db_locale)
        if translation is not None and translation.locale == db_locale and needle in translation.name.lower():
            matches.append(product)
        if len(matches) >= limit:
            break

    context = load_context(matches)
    return [
        SearchHit(
            slug=p.slug,
            name=localized(p.translations, db_locale, "name", p.slug),
            category_name=_category_name(p, context, db_locale),
            product_image=p.product_image,
        )
        for p in matches
    ]


def search_collections(query, locale, limit=10) -> list[CollectionHit]:
    """Collections whose name in the request locale contains ``query``."""
    needle = (query or "").strip().lower()
    if not needle:
        return []

    db_locale = resolve_db_locale(locale)
    collections = current_domain.repository_for(Collection)._dao.query.all().items
    hits = []
    for collection in sorted(collections, key=lambda c: c.slug):
        translation = pick_translation(collection.translations, db_locale)
        if translation is not None and translation.locale == db_locale and needle in translation.name.lower():
            hits.append(CollectionHit(slug=collection.slug, name=translation.name))
        if len(hits) >= limit:
            break
    return hits
