"""Shared volume definitions referenced by product offerings."""

from protean.fields import HasMany, Integer, String

from storefront.domain import storefront


@storefront.entity(part_of="VolumeSize")
class VolumeTranslation:
    locale = String(required=True, max_length=10)
    display_name = String(required=True, max_length=50)


@storefront.aggregate
class VolumeSize:
    """A bottle size such as ``100ml`` with its localized display names."""

    volume_id = Integer(required=True, unique=True)
    value = String(required=True, max_length=20)
    translations = HasMany(VolumeTranslation)

    def translate(self, locale, display_name):
        existing = next((t for t in self.translations if t.locale == locale), None)
        if existing:
            existing.display_name = display_name
        else:
            self.add_translations(VolumeTranslation(locale=locale, display_name=display_name))
