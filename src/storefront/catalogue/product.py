"""Product aggregate with per-locale translations and volume offerings.

A product is priced per (volume, locale) pair: the same 50ml bottle carries
its own price in every market it is offered in. Products are never removed
from storage; soft-deleted products disappear from catalogue reads but stay
resolvable by id for historical orders.
"""

import json
import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


@storefront.entity(part_of="Product")
class ProductTranslation:
    locale = String(required=True, max_length=10)
    name = String(required=True, max_length=255)
    concept = Text()
    sensations = Text()


@storefront.entity(part_of="Product")
class VolumeOffering:
    """A purchasable size of the product in one locale's market."""

    volume_id = Integer(required=True)
    locale = String(required=True, max_length=10)
    price = Float(required=True, min_value=0.0)
    stock = Integer(min_value=0)


@storefront.aggregate
class Product:
    slug = String(required=True, max_length=200, unique=True)
    category_id = Identifier()
    collection_id = Identifier()
    product_image = String(max_length=500)
    tags = Text()  # JSON array of tag slugs
    is_deleted = Boolean(default=False)
    translations = HasMany(ProductTranslation)
    volumes = HasMany(VolumeOffering)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        if self.slug and not _SLUG_PATTERN.match(self.slug):
            raise ValidationError({"slug": ["Slug must contain only lowercase alphanumerics separated by hyphens"]})

    @invariant.post
    def one_translation_per_locale(self):
        locales = [t.locale for t in self.translations]
        if len(locales) != len(set(locales)):
            raise ValidationError({"translations": ["Only one translation per locale is allowed"]})

    @invariant.post
    def one_offering_per_volume_and_locale(self):
        keys = [(v.volume_id, v.locale) for v in self.volumes]
        if len(keys) != len(set(keys)):
            raise ValidationError({"volumes": ["Only one offering per volume and locale is allowed"]})

    @classmethod
    def create(cls, slug, category_id=None, collection_id=None, product_image=None, tags=None):
        now = datetime.now(UTC)
        return cls(
            slug=slug,
            category_id=category_id,
            collection_id=collection_id,
            product_image=product_image,
            tags=json.dumps(list(tags or [])),
            is_deleted=False,
            created_at=now,
            updated_at=now,
        )

    @property
    def tag_slugs(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    def translate(self, locale, name, concept=None, sensations=None):
        """Add or replace the translation for ``locale``."""
        existing = next((t for t in self.translations if t.locale == locale), None)
        if existing:
            existing.name = name
            existing.concept = concept
            existing.sensations = sensations
        else:
            self.add_translations(
                ProductTranslation(locale=locale, name=name, concept=concept, sensations=sensations)
            )
        self.updated_at = datetime.now(UTC)

    def offer_volume(self, volume_id, locale, price, stock=None):
        """Add or reprice the offering of ``volume_id`` in ``locale``."""
        existing = next((v for v in self.volumes if v.volume_id == volume_id and v.locale == locale), None)
        if existing:
            existing.price = price
            existing.stock = stock
        else:
            self.add_volumes(VolumeOffering(volume_id=volume_id, locale=locale, price=price, stock=stock))
        self.updated_at = datetime.now(UTC)

    def offering_for(self, volume_id, db_locales):
        """First offering of ``volume_id`` in the given locales, in order."""
        for locale in db_locales:
            offering = next((v for v in self.volumes if v.volume_id == volume_id and v.locale == locale), None)
            if offering is not None:
                return offering
        return None

    def soft_delete(self):
        if self.is_deleted:
            raise ValidationError({"is_deleted": ["Product is already deleted"]})
        self.is_deleted = True
        self.updated_at = datetime.now(UTC)

    def restore(self):
        if not self.is_deleted:
            raise ValidationError({"is_deleted": ["Product is not deleted"]})
        self.is_deleted = False
        self.updated_at = datetime.now(UTC)
