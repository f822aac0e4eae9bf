# apps/venue/services/ratings.py

import logging

from django.db.models import Avg, Count
from rest_framework.exceptions import NotFound

from apps.venue.models import Center, CenterRating

logger = logging.getLogger(__name__)


def get_center_or_404(center_id):
    center = Center.objects.filter(pk=center_id).first()
    if center is None:
        raise NotFound("Center not found.")
    return center


def add_rating(center_id, member, rating, comment=""):
    """Upsert de la calificación (center, member). Retorna (rating, created)."""
    center = get_center_or_404(center_id)
    obj, created = CenterRating.objects.update_or_create(
        center=center, member=member,
        defaults={"rating": rating, "comment": comment or ""},
    )
    logger.info(
        "[ratings.add] center_id=%s member_id=%s rating=%s created=%s",
        center.id, member.id, rating, created,
    )
    return obj, created


def center_ratings(center_id):
    get_center_or_404(center_id)
    return (
        CenterRating.objects
        .filter(center_id=center_id)
        .select_related("member")
        .order_by("-created_at", "-id")
    )


def member_rating(center_id, member):
    rating = CenterRating.objects.filter(center_id=center_id, member=member).select_related("member").first()
    if rating is None:
        raise NotFound("You have not rated this center yet.")
    return rating


def delete_rating(center_id, member):
    rating = member_rating(center_id, member)
    rating_id = rating.id
    rating.delete()
    logger.info("[ratings.delete] center_id=%s member_id=%s", center_id, member.id)
    return rating_id


def rating_stats(center_id):
    """
    Retorna:
      - {"totalCount", "averageRating" (1 decimal), "distribution": {"1".."5": n}}
    """
    get_center_or_404(center_id)
    qs = CenterRating.objects.filter(center_id=center_id)
    agg = qs.aggregate(avg=Avg("rating"), total=Count("id"))
    counts = dict(qs.values_list("rating").annotate(n=Count("id")).values_list("rating", "n"))
    return {
        "totalCount": agg["total"],
        "averageRating": round(float(agg["avg"]), 1) if agg["avg"] is not None else 0,
        "distribution": {str(star): counts.get(star, 0) for star in range(1, 6)},
    }
