"""
Voucherman public API.

ISSUANCE:
    VoucherService.create(actor, ...)          - Single available voucher
    VoucherService.create_batch(actor, n, ...) - N available vouchers
    VoucherService.issue_bound(actor, ...)     - Active voucher (reward path)

TRANSITIONS:
    VoucherService.bind(actor, code, phone)        - available → active
    VoucherService.bulk_bind(actor, name, phones)  - all-or-nothing bind
    VoucherService.request_claim(actor, id)        - customer asks to redeem
    VoucherService.claim(actor, code, amount)      - → claimed (+ ledger)
    VoucherService.update(actor, id, **fields)     - metadata patch
    VoucherService.delete(actor, id)               - soft delete

QUERIES:
    VoucherService.list(actor, ...)                   - Staff listing
    VoucherService.list_customer_vouchers(actor, ...) - Customer wallet
    VoucherService.public_preview(id)                 - Name and image only
    VoucherService.stats(actor)                       - Dashboard counters
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator
from django.db import IntegrityError, transaction
from django.db.models import Case, Count, IntegerField, OuterRef, Q, Subquery, Value, When
from django.db.models.functions import TruncDate
from django.utils import timezone

from voucherman import audit
from voucherman.codes import generate_code, generate_codes, live_codes
from voucherman.conf import voucherman_settings
from voucherman.exceptions import ConflictError, NotFoundError, UniquenessError, ValidationError
from voucherman.gates import Gates
from voucherman.models import Customer, Redemption, Voucher, VoucherStatus, VoucherTemplate
from voucherman.services import ledger
from voucherman.services import template as template_service
from voucherman.signals import voucher_bound, voucher_claimed, voucher_created, voucher_deleted
from voucherman.utils import compute_expiry, normalize_phone

logger = logging.getLogger(__name__)

_LOOKUP_ERRORS = (Voucher.DoesNotExist, DjangoValidationError, ValueError, TypeError)


@dataclass
class Page:
    """One page of a listing."""

    data: list
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass
class ClaimResult:
    voucher: Voucher
    redemption: Redemption | None = None


@dataclass
class BulkBindResult:
    count: int
    vouchers: list[Voucher] = field(default_factory=list)


class VoucherService:
    """
    Voucher lifecycle and redemption.

    Uses @classmethod for extensibility (consistent with the contrib services).
    Every multi-row write runs in one transaction.atomic() block; the rows
    being transitioned are locked with select_for_update().
    """

    UPDATABLE_FIELDS = {"name", "description", "image_url", "expiry_date"}

    # ======================================================================
    # Lookup
    # ======================================================================

    @classmethod
    def get(cls, voucher_id) -> Voucher | None:
        """Get non-deleted voucher by id."""
        try:
            return Voucher.objects.alive().get(pk=voucher_id)
        except _LOOKUP_ERRORS:
            return None

    @classmethod
    def get_by_code(cls, code: str) -> Voucher | None:
        """
        Get non-deleted voucher by code.

        A live (available/active) voucher wins; otherwise the most recent
        claimed voucher that carried the code.
        """
        return cls._find_by_code(code)

    @classmethod
    def _find_by_code(cls, code: str, for_update: bool = False) -> Voucher | None:
        code = (code or "").strip()
        if not code:
            return None
        qs = Voucher.objects.alive().filter(code=code)
        if for_update:
            qs = qs.select_for_update()
        live = qs.filter(status__in=[VoucherStatus.AVAILABLE, VoucherStatus.ACTIVE]).first()
        if live is not None:
            return live
        return qs.order_by("-created_at").first()

    @classmethod
    def _require_by_code(cls, code: str, for_update: bool = False) -> Voucher:
        voucher = cls._find_by_code(code, for_update=for_update)
        if voucher is None:
            raise NotFoundError("VOUCHER_NOT_FOUND", voucher_code=code)
        return voucher

    @classmethod
    def _require(cls, voucher_id, for_update: bool = False) -> Voucher:
        qs = Voucher.objects.alive()
        if for_update:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=voucher_id)
        except _LOOKUP_ERRORS:
            raise NotFoundError("VOUCHER_NOT_FOUND", voucher_id=str(voucher_id))

    # ======================================================================
    # Issuance
    # ======================================================================

    @classmethod
    def create(
        cls,
        actor,
        name: str = "",
        description: str = "",
        image_url: str = "",
        template_id=None,
    ) -> Voucher:
        """
        Create one available voucher. Admin only.

        With ``template_id`` the template is reused (and supplies any
        presentation field not given). Without it, a ``name`` creates a new
        template inline.

        Raises:
            NotFoundError: If template_id does not resolve
            UniquenessError: If no unique code could be inserted
        """
        actor.require_admin()

        with transaction.atomic():
            template = cls._resolve_template(actor, template_id, name, description, image_url)
            presentation = cls._presentation(template, name, description, image_url)
            voucher = cls._insert_with_unique_code(
                lambda code: Voucher(
                    code=code,
                    status=VoucherStatus.AVAILABLE,
                    template=template,
                    **presentation,
                )
            )

        logger.info("Created voucher %s", voucher.code)
        audit.record("VOUCHER_CREATE", f"Created voucher {voucher.code}", actor)
        voucher_created.send(sender=Voucher, vouchers=[voucher], actor=actor)
        return voucher

    @classmethod
    def create_batch(
        cls,
        actor,
        count,
        name: str = "",
        description: str = "",
        image_url: str = "",
        template_id=None,
    ) -> list[Voucher]:
        """
        Create ``count`` available vouchers sharing one template. Admin only.

        All codes are generated before the first insert; the rows are then
        written with one bulk insert. On a concurrent code collision the
        whole batch is regenerated.

        Raises:
            ValidationError: If count is not a positive integer within MAX_BATCH_SIZE
        """
        actor.require_admin()
        count = cls._parse_count(count)

        with transaction.atomic():
            template = cls._resolve_template(actor, template_id, name, description, image_url)
            presentation = cls._presentation(template, name, description, image_url)

            retries = voucherman_settings.CODE_INSERT_RETRIES
            for attempt in range(1, retries + 1):
                codes = generate_codes(count, live_codes())
                batch = [
                    Voucher(code=code, status=VoucherStatus.AVAILABLE, template=template, **presentation)
                    for code in codes
                ]
                try:
                    with transaction.atomic():
                        vouchers = Voucher.objects.bulk_create(batch)
                    break
                except IntegrityError:
                    logger.info("Batch code collision (attempt %d/%d), regenerating", attempt, retries)
            else:
                raise UniquenessError("CODE_COLLISION", attempts=retries)

        logger.info("Created batch of %d vouchers (%s)", count, presentation["name"])
        audit.record("VOUCHER_BATCH_CREATE", f"Created {count} vouchers in batch", actor)
        voucher_created.send(sender=Voucher, vouchers=vouchers, actor=actor)
        return vouchers

    @classmethod
    def issue_bound(
        cls,
        actor,
        template: VoucherTemplate,
        phone_number: str,
        expiry_date=None,
        expiry_days: int | None = None,
    ) -> Voucher:
        """
        Create a voucher directly in ``active`` state, bound to a customer.

        Used by the stamp-card reward. Runs inside the caller's transaction
        when there is one.
        """
        now = timezone.now()
        expiry = cls._expiry(expiry_date, expiry_days, now)
        phone = normalize_phone(phone_number)

        with transaction.atomic():
            voucher = cls._insert_with_unique_code(
                lambda code: Voucher(
                    code=code,
                    status=VoucherStatus.ACTIVE,
                    template=template,
                    name=template.name,
                    description=template.description,
                    image_url=template.image_url,
                    binded_to_phone_number=phone,
                    expiry_date=expiry,
                    approved_at=now,
                )
            )

        voucher_created.send(sender=Voucher, vouchers=[voucher], actor=actor)
        return voucher

    @classmethod
    def _insert_with_unique_code(cls, build) -> Voucher:
        """
        Insert ``build(code)`` with a fresh code, retrying on a unique violation.

        The live-code set is re-read on every attempt, so a code taken by a
        concurrent request since the last read is excluded next time.
        """
        retries = voucherman_settings.CODE_INSERT_RETRIES
        for attempt in range(1, retries + 1):
            voucher = build(generate_code(live_codes()))
            try:
                with transaction.atomic():
                    voucher.save(force_insert=True)
                return voucher
            except IntegrityError:
                logger.info("Code %s taken concurrently (attempt %d/%d)", voucher.code, attempt, retries)
        raise UniquenessError("CODE_COLLISION", attempts=retries)

    @classmethod
    def _resolve_template(cls, actor, template_id, name, description, image_url) -> VoucherTemplate | None:
        if template_id:
            return template_service.require(template_id)
        if name:
            return VoucherTemplate.objects.create(
                name=name,
                description=description or "",
                image_url=image_url or "",
            )
        return None

    @staticmethod
    def _presentation(template, name, description, image_url) -> dict:
        return {
            "name": name or (template.name if template else ""),
            "description": description or (template.description if template else ""),
            "image_url": image_url or (template.image_url if template else ""),
        }

    # ======================================================================
    # Transitions
    # ======================================================================

    @classmethod
    def bind(
        cls,
        actor,
        code: str,
        phone_number: str,
        expiry_days: int | None = None,
        expiry_date=None,
    ) -> Voucher:
        """
        Bind an available voucher to a registered customer (available → active).

        Args:
            actor: Staff actor
            code: Voucher code
            phone_number: Customer phone (normalized here)
            expiry_days: Days until expiry (default DEFAULT_EXPIRY_DAYS)
            expiry_date: Explicit expiry, wins over expiry_days

        Raises:
            NotFoundError: Unknown code or unregistered customer
            GateError: V2_Bindable if the voucher is not available
        """
        actor.require_staff()
        phone = cls._require_phone(phone_number)
        now = timezone.now()
        expiry = cls._expiry(expiry_date, expiry_days, now)

        with transaction.atomic():
            cls._require_customers([phone])
            voucher = cls._require_by_code(code, for_update=True)
            Gates.bindable(voucher)

            voucher.binded_to_phone_number = phone
            voucher.status = VoucherStatus.ACTIVE
            voucher.approved_at = now
            voucher.expiry_date = expiry
            voucher.save(update_fields=["binded_to_phone_number", "status", "approved_at", "expiry_date"])

        logger.info("Bound voucher %s to %s", voucher.code, phone)
        audit.record("VOUCHER_BIND", f"Bound voucher {voucher.code} to {phone}", actor)
        voucher_bound.send(sender=Voucher, vouchers=[voucher], actor=actor)
        return voucher

    @classmethod
    def bulk_bind(
        cls,
        actor,
        voucher_name: str,
        phone_numbers: list[str],
        expiry_days: int | None = None,
        expiry_date=None,
    ) -> BulkBindResult:
        """
        Bind N available vouchers named ``voucher_name`` to N phone numbers.

        Vouchers are matched to phone numbers by position (oldest voucher
        first). Either every voucher is bound or none is.

        Raises:
            ValidationError: If no phone numbers are supplied
            ConflictError: INSUFFICIENT_VOUCHERS with found/needed counts
            NotFoundError: If any phone is not a registered customer
        """
        actor.require_staff()
        if not phone_numbers or not isinstance(phone_numbers, (list, tuple)):
            raise ValidationError("NO_PHONE_NUMBERS")
        phones = [cls._require_phone(p) for p in phone_numbers]
        needed = len(phones)
        now = timezone.now()
        expiry = cls._expiry(expiry_date, expiry_days, now)

        with transaction.atomic():
            cls._require_customers(phones)
            vouchers = list(
                Voucher.objects.alive()
                .select_for_update()
                .filter(status=VoucherStatus.AVAILABLE, name=voucher_name)
                .order_by("created_at", "id")[:needed]
            )
            found = len(vouchers)
            if found < needed:
                raise ConflictError(
                    "INSUFFICIENT_VOUCHERS",
                    message=f"Not enough available vouchers. Found {found}, need {needed}.",
                    found=found,
                    needed=needed,
                )

            for voucher, phone in zip(vouchers, phones):
                voucher.binded_to_phone_number = phone
                voucher.status = VoucherStatus.ACTIVE
                voucher.approved_at = now
                voucher.expiry_date = expiry
                Gates.voucher_state_invariant(voucher)
            Voucher.objects.bulk_update(
                vouchers,
                ["binded_to_phone_number", "status", "approved_at", "expiry_date"],
            )

        logger.info("Bulk bound %d vouchers for %s", needed, voucher_name)
        audit.record("VOUCHER_BULK_BIND", f"Bulk bound {needed} vouchers for {voucher_name}", actor)
        voucher_bound.send(sender=Voucher, vouchers=vouchers, actor=actor)
        return BulkBindResult(count=needed, vouchers=vouchers)

    @classmethod
    def request_claim(cls, actor, voucher_id) -> Voucher:
        """
        Customer signals they want to redeem an active voucher.

        Customers may only request their own vouchers; staff may request on
        a customer's behalf.

        Raises:
            NotFoundError: Unknown or deleted voucher
            PermissionDeniedError: Voucher is bound to someone else
            GateError: V4_ClaimRequestable if the voucher is not active
        """
        with transaction.atomic():
            voucher = cls._require(voucher_id, for_update=True)
            actor.require_owner_or_staff(voucher.binded_to_phone_number)
            Gates.claim_requestable(voucher)

            voucher.claim_requested_at = timezone.now()
            voucher.save(update_fields=["claim_requested_at"])

        requester = actor.own_phone if actor.is_customer else actor.identity
        audit.record("VOUCHER_CLAIM_REQUEST", f"User {requester} requested claim for {voucher.code}", actor)
        return voucher

    @classmethod
    def claim(cls, actor, code: str, spent_amount=0) -> ClaimResult:
        """
        Redeem a voucher in store.

        In one transaction: the voucher becomes claimed (approved_by, used_at,
        spent_amount set; pending request cleared) and, when it is bound, a
        Redemption row is appended and the customer's total spending grows
        by the same amount. Negative amounts are clamped to 0.

        Raises:
            ValidationError: If spent_amount is not numeric
            NotFoundError: Unknown code
            GateError: V3_Claimable if already claimed
        """
        actor.require_staff()
        amount = cls._parse_amount(spent_amount)

        with transaction.atomic():
            voucher = cls._require_by_code(code, for_update=True)
            Gates.claimable(voucher)

            voucher.status = VoucherStatus.CLAIMED
            voucher.approved_by = actor.identity
            voucher.used_at = timezone.now()
            voucher.claim_requested_at = None
            voucher.spent_amount = amount
            voucher.save(update_fields=["status", "approved_by", "used_at", "claim_requested_at", "spent_amount"])

            redemption = None
            if voucher.binded_to_phone_number:
                redemption = ledger.append(voucher, amount, actor.identity)

        logger.info("Claimed voucher %s (%s, amount=%d)", voucher.code, voucher.binded_to_phone_number, amount)
        audit.record(
            "VOUCHER_CLAIM",
            f"Claimed voucher {voucher.code} for customer "
            f"{voucher.binded_to_phone_number or 'unknown'}. Amount: {amount}",
            actor,
        )
        voucher_claimed.send(sender=Voucher, voucher=voucher, redemption=redemption, actor=actor)
        return ClaimResult(voucher=voucher, redemption=redemption)

    @classmethod
    def update(cls, actor, voucher_id, **fields) -> Voucher:
        """
        Patch presentation fields and, for active vouchers, the expiry.

        Status is not patchable: it changes only through bind and claim.
        The state invariant gate runs on save, so an expiry on an available
        voucher (or clearing it on an active one) is rejected.

        Raises:
            ValidationError: If ``status`` is supplied or expiry is malformed
            GateError: V1_VoucherStateInvariant
        """
        actor.require_staff()
        if "status" in fields:
            raise ValidationError("STATUS_NOT_PATCHABLE")

        changes = {k: v for k, v in fields.items() if k in cls.UPDATABLE_FIELDS and v is not None}
        if "expiry_date" in changes:
            changes["expiry_date"] = cls._expiry(changes["expiry_date"], None, timezone.now())

        with transaction.atomic():
            voucher = cls._require(voucher_id, for_update=True)
            for key, value in changes.items():
                setattr(voucher, key, value)
            if changes:
                voucher.save(update_fields=list(changes))

        if changes:
            audit.record("VOUCHER_UPDATE", f"Updated voucher {voucher.code}: {', '.join(sorted(changes))}", actor)
        return voucher

    @classmethod
    def delete(cls, actor, voucher_id) -> Voucher:
        """
        Soft-delete a voucher in any status.

        The voucher disappears from listings and its code leaves the live
        set. Redemption rows are untouched.
        """
        actor.require_staff()
        with transaction.atomic():
            voucher = cls._require(voucher_id, for_update=True)
            voucher.deleted_at = timezone.now()
            voucher.save(update_fields=["deleted_at"])

        audit.record("VOUCHER_DELETE", f"Deleted voucher {voucher.code}", actor)
        voucher_deleted.send(sender=Voucher, voucher=voucher, actor=actor)
        return voucher

    # ======================================================================
    # Queries
    # ======================================================================

    @classmethod
    def list(
        cls,
        actor,
        status: str | None = None,
        search: str | None = None,
        requested: bool = False,
        page: int = 1,
        limit: int | None = None,
    ) -> Page:
        """
        Staff listing.

        Args:
            status: "all", "expired", "active" or a comma-separated status list
            search: Substring of code or name
            requested: Only active vouchers with a pending claim request
                (ignored when a status filter is given)
            page: 1-based page number
            limit: Page size (default DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE)

        Ordering: active and not expired, available, claimed, active and
        expired; newest first within each group.
        """
        actor.require_staff()
        now = timezone.now()
        qs = Voucher.objects.alive()

        if status and status != "all":
            if status == "expired":
                qs = qs.expired(now)
            elif status == "active":
                qs = qs.unexpired_active(now)
            else:
                qs = qs.filter(status__in=[s.strip() for s in status.split(",") if s.strip()])
        elif requested:
            qs = qs.claim_requested()

        if search:
            qs = qs.filter(Q(code__icontains=search) | Q(name__icontains=search))

        qs = cls._with_customer_name(qs).ordered_for_listing(now)
        return cls._paginate(qs, page, limit)

    @classmethod
    def list_customer_vouchers(cls, actor, phone_number: str | None = None, page: int = 1, limit: int = 4) -> Page:
        """
        Vouchers bound to one customer.

        Customers always see their own wallet; staff pass ``phone_number``.
        Usable vouchers (active, not past expiry plus a one-day grace) come
        first, then claimed, then the rest; latest expiry first.
        """
        target = actor.own_phone if actor.is_customer else normalize_phone(phone_number)
        if not target:
            raise ValidationError("PHONE_REQUIRED")
        actor.require_owner_or_staff(target)

        grace = timezone.now() - timedelta(days=1)
        qs = (
            Voucher.objects.bound_to(target)
            .annotate(
                wallet_rank=Case(
                    When(
                        Q(status=VoucherStatus.ACTIVE)
                        & (Q(expiry_date__isnull=True) | Q(expiry_date__gt=grace)),
                        then=Value(1),
                    ),
                    When(status=VoucherStatus.CLAIMED, then=Value(2)),
                    default=Value(3),
                    output_field=IntegerField(),
                )
            )
            .order_by("wallet_rank", "-expiry_date")
        )
        return cls._paginate(qs, page, limit)

    @classmethod
    def get_customer_voucher(cls, actor, voucher_id) -> Voucher:
        """Single voucher, visible to staff or to the customer it is bound to."""
        voucher = cls._require(voucher_id)
        actor.require_owner_or_staff(voucher.binded_to_phone_number)
        return voucher

    @classmethod
    def public_preview(cls, voucher_id) -> dict:
        """Name and image of a non-deleted voucher. No authentication needed."""
        voucher = cls._require(voucher_id)
        return {"name": voucher.name, "image_url": voucher.image_url}

    @classmethod
    def stats(cls, actor, days: int = 90) -> dict:
        """
        Dashboard counters.

        Returns:
            {"vouchers": {total, available, active, claimed},
             "customers": {total},
             "recent_activity": [5 newest vouchers],
             "chart_data": [{date, binds, claims}] for the last ``days`` days}
        """
        actor.require_staff()
        alive = Voucher.objects.alive()

        counts = {"total": 0, "available": 0, "active": 0, "claimed": 0}
        for row in alive.values("status").annotate(n=Count("id")).order_by():
            counts[row["status"]] = row["n"]
            counts["total"] += row["n"]

        since = timezone.now() - timedelta(days=days)
        binds = cls._daily(alive.filter(approved_at__isnull=False, approved_at__gte=since), "approved_at")
        claims = cls._daily(alive.filter(used_at__isnull=False, used_at__gte=since), "used_at")

        today = timezone.localdate()
        chart = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            chart.append({"date": day.isoformat(), "binds": binds.get(day, 0), "claims": claims.get(day, 0)})

        return {
            "vouchers": counts,
            "customers": {"total": Customer.objects.alive().count()},
            "recent_activity": list(cls._with_customer_name(alive).order_by("-created_at")[:5]),
            "chart_data": chart,
        }

    # ======================================================================
    # Helpers
    # ======================================================================

    @staticmethod
    def _daily(qs, field_name: str) -> dict:
        rows = (
            qs.annotate(day=TruncDate(field_name))
            .values("day")
            .annotate(n=Count("id"))
            .order_by()
        )
        return {row["day"]: row["n"] for row in rows}

    @staticmethod
    def _with_customer_name(qs):
        customer = Customer.objects.alive().filter(phone_number=OuterRef("binded_to_phone_number"))
        return qs.annotate(customer_name=Subquery(customer.values("name")[:1]))

    @staticmethod
    def _paginate(qs, page, limit) -> Page:
        limit = limit or voucherman_settings.DEFAULT_PAGE_SIZE
        try:
            limit = max(1, min(int(limit), voucherman_settings.MAX_PAGE_SIZE))
        except (TypeError, ValueError):
            raise ValidationError("INVALID_INPUT", message="limit must be an integer")

        paginator = Paginator(qs, limit)
        total = paginator.count
        try:
            data = list(paginator.page(page).object_list)
        except PageNotAnInteger:
            raise ValidationError("INVALID_INPUT", message="page must be an integer")
        except EmptyPage:
            data = []
        return Page(
            data=data,
            page=int(page),
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        )

    @staticmethod
    def _require_phone(phone_number) -> str:
        phone = normalize_phone(phone_number)
        if not phone:
            raise ValidationError("PHONE_REQUIRED")
        return phone

    @staticmethod
    def _require_customers(phones) -> None:
        """
        Every phone must belong to a non-deleted customer.

        The matched customer rows are locked, so a bind and a concurrent
        phone change of the same customer are serialized. MUST be called
        inside transaction.atomic(), before the vouchers are locked.
        """
        registered = set(
            Customer.objects.select_for_update()
            .alive()
            .filter(phone_number__in=set(phones))
            .order_by("pk")
            .values_list("phone_number", flat=True)
        )
        missing = sorted(set(phones) - registered)
        if missing:
            raise NotFoundError("CUSTOMER_NOT_FOUND", phone_numbers=missing)

    @staticmethod
    def _expiry(expiry_date, expiry_days, now):
        if expiry_days is not None:
            try:
                expiry_days = int(expiry_days)
            except (TypeError, ValueError):
                raise ValidationError("INVALID_INPUT", message="expiry_days must be an integer")
            if expiry_days <= 0:
                raise ValidationError("INVALID_INPUT", message="expiry_days must be positive")
        try:
            return compute_expiry(expiry_date, expiry_days, now)
        except ValueError as e:
            raise ValidationError("INVALID_INPUT", message=str(e))

    @staticmethod
    def _parse_amount(spent_amount) -> int:
        """Non-negative integer amount. ``None``/"" count as 0."""
        if spent_amount is None or spent_amount == "":
            return 0
        if isinstance(spent_amount, bool):
            raise ValidationError("INVALID_AMOUNT", value=spent_amount)
        try:
            value = Decimal(str(spent_amount).strip())
        except ArithmeticError:
            raise ValidationError("INVALID_AMOUNT", value=spent_amount)
        if not value.is_finite() or value != value.to_integral_value():
            raise ValidationError("INVALID_AMOUNT", value=spent_amount)
        return max(0, int(value))

    @staticmethod
    def _parse_count(count) -> int:
        if isinstance(count, bool):
            raise ValidationError("INVALID_COUNT")
        try:
            count = int(count)
        except (TypeError, ValueError):
            raise ValidationError("INVALID_COUNT")
        if count <= 0 or count > voucherman_settings.MAX_BATCH_SIZE:
            raise ValidationError("INVALID_COUNT", max=voucherman_settings.MAX_BATCH_SIZE)
        return count
