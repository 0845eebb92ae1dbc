"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest

from drives import models
from drives.stores.django_store import DjangoReferenceDataStore

from conftest import EDUCATION, MUMBAI


@pytest.mark.django_db
class TestReferenceCache:
    """Tests for cached city/category lookups."""

    def test_repeated_lookup_is_served_from_cache(self, reference_rows, django_assert_num_queries):
        """Given a city was looked up once, the second lookup hits no table."""
        store = DjangoReferenceDataStore()
        store.get_city(MUMBAI.id)

        with django_assert_num_queries(0):
            city = store.get_city(MUMBAI.id)

        assert city.name == "Mumbai"

    def test_city_added_after_a_miss_is_found(self, reference_rows):
        store = DjangoReferenceDataStore()
        assert store.find_city("Pune") is None

        models.City.objects.create(name="Pune", state="Maharashtra", country="India")

        assert store.find_city("Pune").state == "Maharashtra"


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_city_save_invalidates_city_cache(self, reference_rows):
        """Saving a city starts a new cache generation for cities."""
        store = DjangoReferenceDataStore()
        assert store.get_city(MUMBAI.id).name == "Mumbai"

        row = models.City.objects.get(pk=MUMBAI.id.value)
        row.name = "Bombay"
        row.save()

        assert store.get_city(MUMBAI.id).name == "Bombay"
        assert store.find_city("Bombay", "Maharashtra").id == MUMBAI.id

    def test_city_delete_invalidates_list(self, reference_rows):
        store = DjangoReferenceDataStore()
        assert len(store.list_cities()) == 2

        models.City.objects.get(pk=MUMBAI.id.value).delete()

        assert [city.name for city in store.list_cities()] == ["Delhi"]

    def test_category_save_invalidates_category_cache(self, reference_rows):
        """Saving a category invalidates cached category lookups."""
        store = DjangoReferenceDataStore()
        assert store.find_category("education").id == EDUCATION.id

        models.Category.objects.create(name="Health")

        assert [category.name for category in store.list_categories()] == [
            "Education",
            "Environment",
            "Health",
        ]

    def test_category_save_leaves_city_cache_alone(self, reference_rows, django_assert_num_queries):
        store = DjangoReferenceDataStore()
        store.get_city(MUMBAI.id)

        models.Category.objects.create(name="Health")

        with django_assert_num_queries(0):
            store.get_city(MUMBAI.id)
