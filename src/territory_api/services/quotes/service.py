"""Quote assignment workflow."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from ...errors import NotFoundError
from ...models.domain import QUOTE_ASSIGNED, QUOTE_UNASSIGNED, CreatedQuote, MatchOutcome, Quote
from ...persistence.quotes import delete_quote as delete_quote_record
from ...persistence.quotes import fetch_quote, fetch_quotes, insert_quote
from ..geospatial import validate_coordinates
from ..territories.matcher import resolve_point
from ..territories.service import load_snapshot

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class QuotePage:
    items: list[Quote]
    page: int
    page_size: int
    total: int

    @property
    def has_next_page(self) -> bool:
        return self.page * self.page_size < self.total


def find_assignment(lat: float, lng: float) -> MatchOutcome:
    """Preview which partner would receive a quote at this point. Nothing is stored."""

    lat, lng = validate_coordinates(lat, lng)
    territories, partners = load_snapshot()
    return resolve_point(lat, lng, territories, partners)


def create_and_assign_quote(address: str | None, lat: float, lng: float) -> CreatedQuote:
    """Create a quote already resolved against the current territories.

    The quote is written once, with its final status, so no partially
    assigned row can exist. Territory edits made afterwards never change it.
    """

    lat, lng = validate_coordinates(lat, lng)
    address = address.strip() if address and address.strip() else None

    territories, partners = load_snapshot()
    outcome = resolve_point(lat, lng, territories, partners)
    assignment = outcome.assignment

    row = insert_quote(
        {
            "address": address,
            "lat": lat,
            "lng": lng,
            "status": QUOTE_ASSIGNED if assignment else QUOTE_UNASSIGNED,
            "reason": None if assignment else outcome.reason,
            "assigned_partner_id": assignment.partner_id if assignment else None,
            "territory_id": assignment.territory_id if assignment else None,
        }
    )

    quote_id = str(row["id"])
    if assignment:
        logger.info(
            f"Quote {quote_id} at ({lat}, {lng}) assigned to partner {assignment.partner_id}"
            f" via territory {assignment.territory_id} (priority {assignment.priority})"
        )
    else:
        logger.info(f"Quote {quote_id} at ({lat}, {lng}) left unassigned: {outcome.reason}")

    return CreatedQuote(
        quote_id=quote_id,
        status=QUOTE_ASSIGNED if assignment else QUOTE_UNASSIGNED,
        reason=None if assignment else outcome.reason,
        territory_id=assignment.territory_id if assignment else None,
        territory_name=assignment.territory_name if assignment else None,
        partner_id=assignment.partner_id if assignment else None,
        partner_name=assignment.partner_name if assignment else None,
    )


def list_quotes(
    *,
    status: str | None = None,
    partner_id: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    page: int = 1,
    page_size: int = 20,
) -> QuotePage:
    if date_from and date_to and date_from > date_to:
        raise ValueError("date_from must not be after date_to")
    items, total = fetch_quotes(
        status=status,
        partner_id=partner_id,
        date_from=date_from,
        date_to=date_to,
        offset=(page - 1) * page_size,
        limit=page_size,
    )
    return QuotePage(items=items, page=page, page_size=page_size, total=total)


def get_quote(quote_id: str) -> Quote:
    quote = fetch_quote(quote_id)
    if quote is None:
        raise NotFoundError("Quote", quote_id)
    return quote


def delete_quote(quote_id: str) -> None:
    if not delete_quote_record(quote_id):
        raise NotFoundError("Quote", quote_id)
