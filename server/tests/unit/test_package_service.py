"""Unit tests for package service."""

from decimal import Decimal
from uuid import uuid4

import pytest

from tourer.core.exceptions import AuthorizationError, BadRequestError, ConflictError, NotFoundError
from tourer.models.package import Category
from tourer.schemas.package import CreatePackageRequest, PackageQuery, UpdatePackageRequest
from tourer.services.package_service import PackageService, generate_slug


def test_generate_slug():
    assert generate_slug("City Tour!!") == "city-tour"
    assert generate_slug("  Sahara -- Desert  Trek ") == "sahara-desert-trek"
    assert generate_slug("!!!") == ""


@pytest.mark.asyncio
async def test_create_package_derives_slug(test_session, admin_caller, sample_package_data):
    """Test creating a package without a slug derives it from the title."""
    service = PackageService(test_session)

    package = await service.create_package(CreatePackageRequest(**sample_package_data), admin_caller)

    assert package.id is not None
    assert package.slug == "city-tour"
    assert package.price == Decimal("100.00")
    assert package.rating == 0
    assert package.review_count == 0
    assert package.is_active is True
    assert package.itinerary[1]["title"] == "Old town"


@pytest.mark.asyncio
async def test_create_package_duplicate_slug(test_session, admin_caller, sample_package):
    """Test creating a package whose slug is taken raises ConflictError."""
    service = PackageService(test_session)

    with pytest.raises(ConflictError):
        await service.create_package(
            CreatePackageRequest(
                title="City tour",
                price=Decimal("50"),
                duration=1,
                location_name="Porto"
            ),
            admin_caller
        )


@pytest.mark.asyncio
async def test_create_package_requires_admin(test_session, user_caller, sample_package_data):
    service = PackageService(test_session)

    with pytest.raises(AuthorizationError):
        await service.create_package(CreatePackageRequest(**sample_package_data), user_caller)


@pytest.mark.asyncio
async def test_create_package_title_without_slug_characters(test_session, admin_caller):
    service = PackageService(test_session)

    with pytest.raises(BadRequestError):
        await service.create_package(
            CreatePackageRequest(title="!!!", price=Decimal("10"), duration=1, location_name="Nowhere"),
            admin_caller
        )


@pytest.mark.asyncio
async def test_update_package_slug_conflict(test_session, admin_caller, sample_package):
    """Test changing a slug to one used by another package raises ConflictError."""
    service = PackageService(test_session)
    other = await service.create_package(
        CreatePackageRequest(title="Harbour Cruise", price=Decimal("80"), duration=1, location_name="Lisbon"),
        admin_caller
    )

    with pytest.raises(ConflictError):
        await service.update_package(other.id, UpdatePackageRequest(slug="city-tour"), admin_caller)

    # Keeping its own slug is not a conflict
    updated = await service.update_package(
        sample_package.id,
        UpdatePackageRequest(slug="city-tour", price=Decimal("120")),
        admin_caller
    )
    assert updated.slug == "city-tour"
    assert updated.price == Decimal("120")


@pytest.mark.asyncio
async def test_update_package_not_found(test_session, admin_caller):
    service = PackageService(test_session)

    with pytest.raises(NotFoundError):
        await service.update_package(uuid4(), UpdatePackageRequest(title="Ghost"), admin_caller)


@pytest.mark.asyncio
async def test_remove_package_is_soft_delete(test_session, admin_caller, sample_package):
    """Test removing a package hides it from search but keeps the row."""
    service = PackageService(test_session)

    await service.remove_package(sample_package.id, admin_caller)

    found = await service.get_package_by_id(sample_package.id)
    assert found is not None
    assert found.is_active is False

    packages, pagination = await service.search_packages(PackageQuery())
    assert packages == []
    assert pagination.total == 0


@pytest.mark.asyncio
async def test_search_packages_filters_and_sorting(test_session, admin_caller, sample_package):
    service = PackageService(test_session)
    await service.create_package(
        CreatePackageRequest(
            title="Atlas Trek",
            price=Decimal("450"),
            duration=8,
            location_name="Imlil",
            country="Morocco",
            category=Category.ADVENTURE
        ),
        admin_caller
    )
    await service.create_package(
        CreatePackageRequest(
            title="Hidden Beach",
            price=Decimal("300"),
            duration=3,
            location_name="Lagos",
            country="Portugal",
            category=Category.BEACH,
            is_available=False
        ),
        admin_caller
    )

    packages, pagination = await service.search_packages(PackageQuery(sort_by="price", sort_order="asc"))
    assert [p.title for p in packages] == ["City Tour!!", "Atlas Trek"]
    assert pagination.total == 2
    assert pagination.pages == 1

    packages, _ = await service.search_packages(PackageQuery(country="moroc"))
    assert [p.title for p in packages] == ["Atlas Trek"]

    packages, _ = await service.search_packages(PackageQuery(search="OLD TOWN"))
    assert [p.title for p in packages] == ["City Tour!!"]

    packages, _ = await service.search_packages(PackageQuery(min_price=Decimal("200"), max_duration=10))
    assert [p.title for p in packages] == ["Atlas Trek"]

    packages, pagination = await service.search_packages(PackageQuery(limit=1, page=2, sort_by="title", sort_order="asc"))
    assert [p.title for p in packages] == ["City Tour!!"]
    assert pagination.pages == 2


@pytest.mark.asyncio
async def test_popular_and_categories(test_session, admin_caller, sample_package):
    service = PackageService(test_session)
    trek = await service.create_package(
        CreatePackageRequest(
            title="Atlas Trek",
            price=Decimal("450"),
            duration=8,
            location_name="Imlil",
            category=Category.ADVENTURE
        ),
        admin_caller
    )
    trek.rating = 4.5
    trek.review_count = 2
    await test_session.commit()

    popular = await service.get_popular_packages()
    assert [p.id for p in popular] == [trek.id, sample_package.id]

    categories = await service.get_categories()
    assert categories == [Category.ADVENTURE, Category.CITY]


@pytest.mark.asyncio
async def test_get_package_by_slug_or_raise(test_session, sample_package):
    service = PackageService(test_session)

    found = await service.get_package_by_slug_or_raise("city-tour")
    assert found.id == sample_package.id

    with pytest.raises(NotFoundError):
        await service.get_package_by_slug_or_raise("missing")


@pytest.mark.asyncio
async def test_search_matches_wildcards_literally(test_session, admin_caller, sample_package):
    service = PackageService(test_session)
    for title in ("100% Douro Wine", "1000 Lakes", "Rail_Pass Europe", "Rail Pass Alps"):
        await service.create_package(
            CreatePackageRequest(title=title, price=Decimal("10"), duration=1, location_name="Anywhere"),
            admin_caller
        )

    packages, _ = await service.search_packages(PackageQuery(search="100%"))
    assert [p.title for p in packages] == ["100% Douro Wine"]

    packages, _ = await service.search_packages(PackageQuery(search="rail_pass"))
    assert [p.title for p in packages] == ["Rail_Pass Europe"]

    packages, _ = await service.search_packages(PackageQuery(location="%"))
    assert packages == []
