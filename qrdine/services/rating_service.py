import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import ValidationError as SchemaError
from tortoise.functions import Count, Sum
from tortoise.transactions import in_transaction

from qrdine.core.errors import Forbidden, NotFound, ValidationError, translate_db_errors
from qrdine.models.account import Customer
from qrdine.models.menu import MenuItem
from qrdine.models.order import Order
from qrdine.models.rating import Rating
from qrdine.schemas.rating import RatingEntry
from qrdine.services.tenant_service import resolve_tenant

log = logging.getLogger("rating_service")

MIN_RATING, MAX_RATING = 1, 5


def _parse_entries(ratings: Iterable[Union[Dict, RatingEntry]]) -> List[RatingEntry]:
    """
    Validates the whole batch up front so that a single bad entry rejects the
    submission before anything is written. A menu item rated twice in one
    batch keeps the last entry.
    """
    if not ratings:
        raise ValidationError("Order ID and ratings are required")
    by_item: Dict[int, RatingEntry] = {}
    for raw in ratings:
        try:
            entry = raw if isinstance(raw, RatingEntry) else RatingEntry.model_validate(raw)
        except SchemaError:
            raise ValidationError("Invalid rating data")
        if not MIN_RATING <= entry.rating <= MAX_RATING:
            raise ValidationError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        by_item[entry.menu_item_id] = entry
    return list(by_item.values())


def average(total, votes) -> Decimal:
    if not votes:
        return Decimal("0")
    return (Decimal(total) / Decimal(votes)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


async def recompute_menu_item_rating(menu_item_id: int, conn=None) -> Tuple[Decimal, int]:
    """
    Recomputes average and count from the full rating set of one menu item
    (one aggregate query) and stores both on the item.
    """
    rows = await (
        Rating.filter(menu_item_id=menu_item_id)
        .using_db(conn)
        .annotate(total=Sum("rating"), votes=Count("id"))
        .group_by("menu_item_id")
        .values("menu_item_id", "total", "votes")
    )
    total, votes = (rows[0]["total"] or 0, rows[0]["votes"] or 0) if rows else (0, 0)
    rating_average = average(total, votes)
    await MenuItem.filter(id=menu_item_id).using_db(conn).update(
        rating_average=rating_average, rating_count=votes
    )
    return rating_average, votes


async def _load_rateable_order(order_id, tenant_id: int, customer_id: Optional[int]) -> Order:
    order = await Order.get_or_none(id=order_id)
    if not order:
        raise NotFound("Order not found")
    if order.tenant_id != tenant_id:
        log.warning(f"AUDIT: tenant {tenant_id} attempted to rate order {order_id} of another tenant.")
        raise Forbidden()
    if customer_id is not None and order.customer_id is not None and int(customer_id) != order.customer_id:
        log.warning(f"AUDIT: customer {customer_id} attempted to rate order {order_id} of another customer.")
        raise Forbidden()
    return order


@translate_db_errors
async def submit_ratings(
    order_id,
    tenant_id,
    ratings: Iterable[Union[Dict[str, Any], RatingEntry]],
    customer_id: Optional[int] = None,
) -> List[Rating]:
    """
    Upserts one rating per (order, menu item) and refreshes each touched menu
    item's aggregate. All entries are applied in one transaction or none are.
    """
    tenant = await resolve_tenant(tenant_id)
    order = await _load_rateable_order(order_id, tenant.id, customer_id)
    entries = _parse_entries(ratings)

    menu_item_ids = sorted(entry.menu_item_id for entry in entries)
    owned = set(await MenuItem.filter(id__in=menu_item_ids, tenant_id=order.tenant_id).values_list("id", flat=True))
    if set(menu_item_ids) - owned:
        raise NotFound("Menu item not found")

    rating_customer_id = order.customer_id
    if rating_customer_id is None and customer_id is not None:
        if await Customer.filter(id=customer_id).exists():
            rating_customer_id = int(customer_id)

    saved = []
    async with in_transaction() as conn:
        # Lock every touched item in id order so concurrent batches serialize per item
        # and cannot deadlock against each other.
        await MenuItem.filter(id__in=menu_item_ids).using_db(conn).select_for_update().order_by("id")

        for entry in entries:
            rating = await Rating.filter(order_id=order.id, menu_item_id=entry.menu_item_id).using_db(conn).first()
            if rating:
                rating.rating = entry.rating
                rating.review = entry.review
                await rating.save(update_fields=["rating", "review", "updated_at"], using_db=conn)
            else:
                rating = await Rating.create(
                    menu_item_id=entry.menu_item_id,
                    order_id=order.id,
                    tenant_id=order.tenant_id,
                    customer_id=rating_customer_id,
                    rating=entry.rating,
                    review=entry.review,
                    using_db=conn,
                )
            saved.append(rating)
            await recompute_menu_item_rating(entry.menu_item_id, conn)

    log.info(f"{len(saved)} rating(s) recorded for Order {order.id} (tenant {order.tenant_id}).")
    return saved


@translate_db_errors
async def get_ratings_for_order(order_id, tenant_id) -> Dict[int, Dict[str, Any]]:
    """Returns {menu_item_id: {"rating": int, "review": str | None}} for one order of the calling tenant."""
    tenant = await resolve_tenant(tenant_id)
    order = await Order.get_or_none(id=order_id)
    if not order:
        raise NotFound("Order not found")
    if order.tenant_id != tenant.id:
        log.warning(f"AUDIT: tenant {tenant.id} attempted to read ratings of order {order_id} of another tenant.")
        raise Forbidden()

    rows = await Rating.filter(order_id=order_id).order_by("id").values("menu_item_id", "rating", "review")
    return {row["menu_item_id"]: {"rating": row["rating"], "review": row["review"]} for row in rows}
