from __future__ import annotations

import html

from glidewatch.common.types import Listing, ListingDetails, NotificationMessage, SellerInfo


PRICE_MARKER = "💶"
PERSON_MARKER = "👤"
GLOBE_MARKER = "🌍"


def seller_location(details: ListingDetails | None, user: SellerInfo | None) -> str | None:
    if user and user.location:
        return user.location
    if details and details.location:
        return details.location
    return None


def format_console(
    listing: Listing,
    details: ListingDetails | None = None,
    user: SellerInfo | None = None,
) -> str:
    lines = [f" - {listing.title}"]
    if details and details.price:
        lines.append(f"   {PRICE_MARKER}  {details.price}")
    seller = _seller_text(user, seller_location(details, user))
    if seller:
        lines.append(f"   {seller}")
    lines.append(f"   {listing.link}")
    return "\n".join(lines)


def format_message(
    listing: Listing,
    details: ListingDetails | None = None,
    user: SellerInfo | None = None,
    include_description: bool = True,
) -> str:
    link = html.escape(listing.link)
    parts = [f'<a href="{link}">{html.escape(listing.title)}</a>']

    if details and details.price:
        parts.append(f"<b>{PRICE_MARKER} {html.escape(details.price)}</b>")

    seller = _seller_html(details, user)
    if seller:
        parts.append(seller)

    if include_description and listing.description:
        parts.append(html.escape(listing.description))

    parts.append(link)
    return "\n\n".join(parts)


def build_notification(
    listing: Listing,
    details: ListingDetails | None = None,
    user: SellerInfo | None = None,
) -> NotificationMessage:
    return NotificationMessage(
        console=format_console(listing, details, user),
        body=format_message(listing, details, user),
        short_body=format_message(listing, details, user, include_description=False),
    )


def _seller_text(user: SellerInfo | None, location: str | None) -> str | None:
    name = user.name if user else None
    if name:
        suffix = f" ({location})" if location else ""
        return f"{PERSON_MARKER}  {name}{suffix}"
    if location:
        return f"{GLOBE_MARKER}  {location}"
    return None


def _seller_html(details: ListingDetails | None, user: SellerInfo | None) -> str | None:
    location = seller_location(details, user)
    name = user.name if user else None
    if name:
        profile = details.user_link if details else None
        label = html.escape(name)
        if profile:
            label = f'<a href="{html.escape(profile)}">{label}</a>'
        suffix = f" ({html.escape(location)})" if location else ""
        return f"{PERSON_MARKER} {label}{suffix}"
    if location:
        return f"{GLOBE_MARKER} {html.escape(location)}"
    return None
