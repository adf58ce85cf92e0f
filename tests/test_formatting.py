from __future__ import annotations

from glidewatch.common.formatting import build_notification, format_console, format_message
from glidewatch.common.types import Listing, ListingDetails, SellerInfo


LISTING = Listing(
    guid="101",
    title="ASK 21 & Anhänger",
    link="https://www.segelflug.de/osclass/index.php?page=item&id=101",
    description="Gepflegter Doppelsitzer <wenig Stunden>",
)
DETAILS = ListingDetails(
    price="12.500 €",
    location="Musterstadt",
    photo_urls=["https://www.segelflug.de/photos/101.jpg"],
    user_link="https://www.segelflug.de/osclass/index.php?page=user&action=pub_profile&id=7",
)


def test_message_with_all_parts() -> None:
    body = format_message(LISTING, DETAILS, SellerInfo(name="Max", location="Hahnweide"))

    assert body == "\n\n".join(
        [
            '<a href="https://www.segelflug.de/osclass/index.php?page=item&amp;id=101">ASK 21 &amp; Anhänger</a>',
            "<b>💶 12.500 €</b>",
            '👤 <a href="https://www.segelflug.de/osclass/index.php?page=user&amp;action=pub_profile&amp;id=7">Max</a> (Hahnweide)',
            "Gepflegter Doppelsitzer &lt;wenig Stunden&gt;",
            "https://www.segelflug.de/osclass/index.php?page=item&amp;id=101",
        ]
    )


def test_seller_line_uses_globe_when_only_location_known() -> None:
    body = format_message(LISTING, DETAILS, SellerInfo(name=None, location=None))

    assert "🌍 Musterstadt" in body
    assert "👤" not in body


def test_seller_line_absent_without_name_or_location() -> None:
    details = ListingDetails(price=None, location=None)

    body = format_message(LISTING, details, None)

    assert "👤" not in body
    assert "🌍" not in body
    assert "<b>" not in body


def test_seller_name_without_profile_link() -> None:
    body = format_message(LISTING, None, SellerInfo(name="Max"))

    assert "👤 Max" in body
    assert "<a href" in body.split("\n\n")[0]


def test_short_body_omits_description() -> None:
    message = build_notification(LISTING, DETAILS, SellerInfo(name="Max"))

    assert "Gepflegter" in message.body
    assert "Gepflegter" not in message.short_body
    assert message.short_body.endswith(LISTING.link.replace("&", "&amp;"))


def test_console_summary() -> None:
    console = format_console(LISTING, DETAILS, SellerInfo(name="Max", location="Hahnweide"))

    assert console.splitlines() == [
        " - ASK 21 & Anhänger",
        "   💶  12.500 €",
        "   👤  Max (Hahnweide)",
        "   https://www.segelflug.de/osclass/index.php?page=item&id=101",
    ]


def test_console_summary_without_enrichment() -> None:
    console = format_console(LISTING)

    assert console.splitlines() == [
        " - ASK 21 & Anhänger",
        "   https://www.segelflug.de/osclass/index.php?page=item&id=101",
    ]
