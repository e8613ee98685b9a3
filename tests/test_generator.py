"""Tests for the sample product generator."""

import random
from datetime import date, timedelta

import pytest

from product_catalog.models.product import utcnow
from product_catalog.schemas.product import ProductTemplate
from product_catalog.services.generator import (
    AVAILABILITY_STATUSES,
    BRANDS,
    CATEGORIES,
    COLORS,
    SIZES,
    ProductGenerator,
)


@pytest.fixture()
def generator():
    return ProductGenerator(random.Random(42))


@pytest.mark.parametrize("count", [1, 10, 500])
def test_generates_exactly_count_with_distinct_skus(generator, count):
    products = generator.generate(count)

    assert len(products) == count
    assert len({p.sku for p in products}) == count
    assert len({p.id for p in products}) == count


def test_zero_count_generates_nothing(generator):
    assert generator.generate(0) == []


def test_random_products_are_in_range(generator):
    today = utcnow().date()
    for p in generator.generate(200):
        assert p.category in CATEGORIES
        assert p.brand in BRANDS
        assert p.availability_status in AVAILABILITY_STATUSES
        assert p.name.startswith(p.brand)
        assert p.sku.startswith(f"{p.category[:3].upper()}-{p.brand[:3].upper()}-")
        assert 5.0 <= p.price <= 1000.0
        assert 0 <= p.stock_quantity < 1000
        assert 1.0 <= p.customer_rating <= 5.0
        assert today - timedelta(days=365 * 3) <= p.release_date <= today
        colors = p.available_colors.split(", ")
        sizes = p.available_sizes.split(", ")
        assert 1 <= len(colors) <= 4 and set(colors) <= set(COLORS)
        assert 1 <= len(sizes) <= 3 and set(sizes) <= set(SIZES)
        assert p.description


def test_seeded_generators_are_reproducible():
    first = ProductGenerator(random.Random(7)).generate(5)
    second = ProductGenerator(random.Random(7)).generate(5)

    assert [(p.name, p.sku, p.price) for p in first] == [(p.name, p.sku, p.price) for p in second]


def test_template_values_are_reused_with_jitter(generator):
    template = ProductTemplate(
        name="Desk Lamp",
        description="Warm light",
        category="Home & Garden",
        brand="HomeComfort",
        price=50.0,
        stock_quantity=10,
        sku="LAMP",
        release_date=date(2024, 5, 1),
        availability_status="Pre-order",
        customer_rating=4.8,
        available_colors="White",
        available_sizes="Small",
    )

    products = generator.generate(20, template)

    for i, p in enumerate(products, start=1):
        assert p.name == f"Desk Lamp - Variant {i}"
        assert p.sku == f"LAMP-{i:04d}"
        assert p.description == f"Warm light (Generated variant {i})"
        assert p.category == "Home & Garden"
        assert p.brand == "HomeComfort"
        assert p.availability_status == "Pre-order"
        assert p.available_colors == "White"
        assert p.available_sizes == "Small"
        assert 40.0 <= p.price <= 60.0
        assert 0 <= p.stock_quantity <= 60
        assert abs((p.release_date - date(2024, 5, 1)).days) <= 30
        assert 4.3 <= p.customer_rating <= 5.0


def test_template_jitter_never_goes_out_of_bounds(generator):
    template = ProductTemplate(price=0.01, stock_quantity=0, customer_rating=1.0)

    for p in generator.generate(100, template):
        assert p.price >= 0.01
        assert p.stock_quantity >= 0
        assert 1.0 <= p.customer_rating <= 5.0


def test_partial_template_falls_back_to_random_fields(generator):
    products = generator.generate(5, ProductTemplate(brand="BuildIt"))

    assert all(p.brand == "BuildIt" for p in products)
    assert all(p.category in CATEGORIES for p in products)
    assert len({p.sku for p in products}) == 5
