"""Category and Collection aggregates — localized groupings of products."""

from protean.fields import HasMany, String

from storefront.domain import storefront


@storefront.entity(part_of="Category")
class CategoryTranslation:
    locale = String(required=True, max_length=10)
    name = String(required=True, max_length=100)


@storefront.aggregate
class Category:
    """Product category, e.g. Eau de Parfum."""

    slug = String(required=True, max_length=100, unique=True)
    translations = HasMany(CategoryTranslation)

    def translate(self, locale, name):
        existing = next((t for t in self.translations if t.locale == locale), None)
        if existing:
            existing.name = name
        else:
            self.add_translations(CategoryTranslation(locale=locale, name=name))


@storefront.entity(part_of="Collection")
class CollectionTranslation:
    locale = String(required=True, max_length=10)
    name = String(required=True, max_length=100)


@storefront.aggregate
class Collection:
    """Themed collection, e.g. Greek Mythology."""

    slug = String(required=True, max_length=100, unique=True)
    translations = HasMany(CollectionTranslation)

    def translate(self, locale, name):
        existing = next((t for t in self.translations if t.locale == locale), None)
        if existing:
            existing.name = name
        else:
            self.add_translations(CollectionTranslation(locale=locale, name=name))
