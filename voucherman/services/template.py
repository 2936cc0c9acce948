"""Template service - shared presentation records for vouchers."""

import logging

from voucherman import audit
from voucherman.conf import voucherman_settings
from voucherman.exceptions import NotFoundError, ValidationError
from voucherman.models import VoucherTemplate

logger = logging.getLogger(__name__)


def get(template_id) -> VoucherTemplate | None:
    """Get template by id."""
    try:
        return VoucherTemplate.objects.get(pk=template_id)
    except (VoucherTemplate.DoesNotExist, ValueError, TypeError):
        return None


def require(template_id) -> VoucherTemplate:
    """Get template by id or raise NotFoundError."""
    template = get(template_id)
    if template is None:
        raise NotFoundError("TEMPLATE_NOT_FOUND", template_id=template_id)
    return template


def list_templates(actor) -> list[VoucherTemplate]:
    """All templates, newest first."""
    actor.require_staff()
    return list(VoucherTemplate.objects.all())


def create(actor, name: str, description: str = "", image_url: str = "") -> VoucherTemplate:
    """Create a template."""
    actor.require_staff()
    if not name or not name.strip():
        raise ValidationError("INVALID_INPUT", message="Template name is required")
    template = VoucherTemplate.objects.create(
        name=name.strip(),
        description=description or "",
        image_url=image_url or "",
    )
    audit.record("TEMPLATE_CREATE", f"Created template {template.name}", actor)
    return template


def delete(actor, template_id) -> None:
    """
    Delete a template.

    Issued vouchers keep their copied name/description/image; their
    template link is cleared.
    """
    actor.require_staff()
    template = require(template_id)
    name = template.name
    template.delete()
    audit.record("TEMPLATE_DELETE", f"Deleted template {name}", actor)


def resolve_reward_template(template_id=None) -> VoucherTemplate:
    """
    Template for a stamp-card reward.

    An explicit id must resolve. Without one, the oldest template is used
    when REWARD_TEMPLATE_FALLBACK is on; otherwise an id is required.

    Raises:
        NotFoundError: If the id does not resolve or no template exists
        ValidationError: If no id is given and the fallback is disabled
    """
    if template_id:
        return require(template_id)

    if not voucherman_settings.REWARD_TEMPLATE_FALLBACK:
        raise ValidationError("TEMPLATE_REQUIRED")

    template = VoucherTemplate.objects.order_by("created_at", "id").first()
    if template is None:
        raise NotFoundError("TEMPLATE_NOT_FOUND", message="Reward template not found.")
    logger.info("No reward template given, falling back to %s (id=%s)", template.name, template.pk)
    return template
