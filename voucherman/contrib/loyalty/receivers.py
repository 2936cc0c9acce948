"""Keep stamp cards keyed to the customer's current phone number."""

import logging

from django.dispatch import receiver

from voucherman.contrib.loyalty.models import Visit
from voucherman.models import Customer
from voucherman.signals import customer_phone_changed

logger = logging.getLogger(__name__)


@receiver(customer_phone_changed, sender=Customer, dispatch_uid="voucherman_loyalty_rekey_visits")
def rekey_visits(sender, customer, old_phone, new_phone, **kwargs):
    """Runs inside the rebind transaction."""
    moved = Visit.objects.filter(customer_phone_number=old_phone).update(customer_phone_number=new_phone)
    if moved:
        logger.info("Moved %d visits from %s to %s", moved, old_phone, new_phone)
