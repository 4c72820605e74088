from types import SimpleNamespace

import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    from protean import current_domain
    from storefront.identity.auth import StaticAuth, reset_auth, set_auth

    set_auth(StaticAuth())
    with storefront_bed.domain_context():
        yield

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()
    reset_auth()


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------
@pytest.fixture
def auth():
    from storefront.identity.auth import get_auth

    return get_auth()


@pytest.fixture
def customer(auth):
    """A registered customer, signed in."""
    from protean import current_domain
    from storefront.identity.user import User

    user = User.register(email="ines@example.com", name="Ines Duval", phone="0611223344")
    user.change_address(
        address_line1="12 Rue des Lilas",
        city="Lyon",
        postal_code="69003",
        country="France",
    )
    current_domain.repository_for(User).add(user)
    auth.sign_in("ines@example.com", id=str(user.id), role="customer", name="Ines Duval")
    return user


@pytest.fixture
def other_customer():
    from protean import current_domain
    from storefront.identity.user import User

    user = User.register(email="tomas@example.com", name="Tomas Berg")
    current_domain.repository_for(User).add(user)
    return user


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
@pytest.fixture
def catalogue():
    """A small multilingual catalogue.

    * rose-noir: en-US and fr-FR names, no zh-TW; 50 ml in en-US/fr-FR, 100 ml in en-US
    * cedar-mist: en-US and zh-TW names; 50 ml in en-US and zh-TW
    * old-amber: soft-deleted
    """
    from protean import current_domain
    from storefront.catalogue.product import Product
    from storefront.catalogue.taxonomy import Category, Collection
    from storefront.catalogue.volume import VolumeSize

    category = Category(slug="eau-de-parfum")
    category.translate("en-US", "Eau de Parfum")
    category.translate("zh-TW", "淡香精")
    current_domain.repository_for(Category).add(category)

    collection = Collection(slug="nocturne")
    collection.translate("en-US", "Nocturne")
    collection.translate("fr-FR", "Nocturne")
    current_domain.repository_for(Collection).add(collection)

    for volume_id, value, display in ((1, "50ml", "50 ml"), (2, "100ml", "100 ml")):
        size = VolumeSize(volume_id=volume_id, value=value)
        size.translate("en-US", display)
        current_domain.repository_for(VolumeSize).add(size)

    rose = Product.create(
        slug="rose-noir",
        category_id=str(category.id),
        collection_id=str(collection.id),
        product_image="/img/rose-noir.jpg",
        tags=["floral", "night"],
    )
    rose.translate("en-US", "Rose Noir", concept="A dark rose")
    rose.translate("fr-FR", "Rose Noire", concept="Une rose sombre")
    rose.offer_volume(1, "en-US", 120.0, stock=5)
    rose.offer_volume(1, "fr-FR", 130.0, stock=5)
    rose.offer_volume(2, "en-US", 180.0, stock=2)
    current_domain.repository_for(Product).add(rose)

    cedar = Product.create(
        slug="cedar-mist",
        category_id=str(category.id),
        product_image="/img/cedar-mist.jpg",
        tags=["woody"],
    )
    cedar.translate("en-US", "Cedar Mist")
    cedar.translate("zh-TW", "雪松霧")
    cedar.offer_volume(1, "en-US", 95.0, stock=10)
    cedar.offer_volume(1, "zh-TW", 3000.0, stock=10)
    current_domain.repository_for(Product).add(cedar)

    amber = Product.create(slug="old-amber", category_id=str(category.id))
    amber.translate("en-US", "Old Amber")
    amber.offer_volume(1, "en-US", 60.0)
    amber.soft_delete()
    current_domain.repository_for(Product).add(amber)

    return SimpleNamespace(
        category=category,
        collection=collection,
        rose=rose,
        cedar=cedar,
        amber=amber,
    )
