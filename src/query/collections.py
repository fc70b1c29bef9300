"""Allowlisted CRM collections and their default search properties.

Only identifiers listed here are ever interpolated into a search URL; anything else is rejected with
`UnsupportedEndpoint` before a request is built.
"""

from __future__ import annotations

import re

from src.query.errors import UnsupportedEndpoint

STANDARD_OBJECTS: tuple[str, ...] = ("contacts", "companies", "deals", "tickets")

ECOMMERCE_OBJECTS: tuple[str, ...] = (
    "products",
    "line_items",
    "quotes",
    "invoices",
    "orders",
    "carts",
    "discounts",
)

ENGAGEMENT_OBJECTS: tuple[str, ...] = (
    "calls",
    "emails",
    "meetings",
    "notes",
    "tasks",
    "communications",
)

OTHER_OBJECTS: tuple[str, ...] = ("feedback_submissions", "goal_targets", "leads")

SUPPORTED_COLLECTIONS: tuple[str, ...] = (
    *STANDARD_OBJECTS,
    *ECOMMERCE_OBJECTS,
    *ENGAGEMENT_OBJECTS,
    *OTHER_OBJECTS,
)

FALLBACK_PROPERTIES: tuple[str, ...] = ("hs_object_id", "hs_createdate", "hs_lastmodifieddate")

DEFAULT_PROPERTIES: dict[str, tuple[str, ...]] = {
    "contacts": ("firstname", "lastname", "email"),
    "companies": ("name", "domain", "industry"),
    "deals": ("dealname", "amount", "dealstage"),
    "tickets": ("subject", "content", "hs_pipeline_stage"),
    "products": ("name", "price", "description"),
    "line_items": ("name", "quantity", "price"),
    "quotes": ("hs_title", "hs_expiration_date", "hs_status"),
    "calls": ("hs_call_title", "hs_call_body", "hs_timestamp"),
    "emails": ("hs_email_subject", "hs_email_text", "hs_timestamp"),
    "meetings": ("hs_meeting_title", "hs_meeting_start_time", "hs_meeting_end_time"),
    "notes": ("hs_note_body", "hs_timestamp"),
    "tasks": ("hs_task_subject", "hs_task_status", "hs_timestamp"),
}

# Longest first so that no identifier shadows a longer one sharing its prefix.
_COLLECTION_RE = re.compile(
    r"\b(" + "|".join(sorted(SUPPORTED_COLLECTIONS, key=lambda c: (-len(c), c))) + r")\b"
)


def is_supported(collection: str) -> bool:
    return collection in SUPPORTED_COLLECTIONS


def require_supported(collection: str) -> str:
    """Return the collection unchanged, or raise `UnsupportedEndpoint` with the allow-list."""

    if not is_supported(collection):
        raise UnsupportedEndpoint(collection, SUPPORTED_COLLECTIONS)
    return collection


def default_properties(collection: str) -> list[str]:
    return list(DEFAULT_PROPERTIES.get(collection, FALLBACK_PROPERTIES))


def detect_collection(raw_text: str) -> str:
    """Find the collection a text query targets (first supported identifier by position)."""

    match = _COLLECTION_RE.search(raw_text or "")
    if match is None:
        raise UnsupportedEndpoint(
            "", SUPPORTED_COLLECTIONS, message="Query does not name a supported collection"
        )
    return match.group(1)
