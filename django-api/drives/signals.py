"""Django signals for cache invalidation and status notifications."""

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import Signal, receiver

from drives.models import Category, City
from drives.stores.django_store import invalidate_reference_cache

logger = logging.getLogger(__name__)

# Sent after a drive's status change is persisted, whether made by the
# status engine or by the creator. Kwargs: event, previous, actor.
event_status_changed = Signal()


@receiver([post_save, post_delete], sender=City)
def invalidate_city_cache(sender, instance, **kwargs):
    """Invalidate cached city lookups when a city is saved or deleted."""
    invalidate_reference_cache("cities")


@receiver([post_save, post_delete], sender=Category)
def invalidate_category_cache(sender, instance, **kwargs):
    """Invalidate cached category lookups when a category is saved or deleted."""
    invalidate_reference_cache("categories")


@receiver(event_status_changed)
def log_status_change(sender, event, previous, actor, **kwargs):
    logger.debug(
        f"Status change available for notifiers: drive {event.id} "
        f"{previous.value} -> {event.status_kind.value} by {actor}"
    )
