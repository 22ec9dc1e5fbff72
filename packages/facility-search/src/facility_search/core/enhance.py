from __future__ import annotations

import random
import re

from facility_search.core.models import MedicalFacility

PLACEHOLDER_PHONE_PATTERN = re.compile(r"^\+1-555-\d{4}$")

_TITLE_PREFIX = re.compile(r"^(Dr\.|Dr |Doctor )", re.IGNORECASE)
_CREDENTIAL_SUFFIX = re.compile(r"(, MD|, DO|, DDS|, DMD)$", re.IGNORECASE)
_WORD = re.compile(r"\b\w+")


def clean_facility_name(name: str) -> str:
    original = " ".join(name.split())
    cleaned = _TITLE_PREFIX.sub("", original)
    cleaned = _CREDENTIAL_SUFFIX.sub("", cleaned).strip()

    seen: set[str] = set()
    unique_words: list[str] = []
    for word in cleaned.split():
        folded = word.lower()
        if folded in seen:
            continue
        seen.add(folded)
        unique_words.append(word)
    cleaned = " ".join(unique_words)
    if not cleaned:
        cleaned = original
    return _WORD.sub(lambda match: match.group(0)[:1].upper() + match.group(0)[1:].lower(), cleaned)


def placeholder_phone(rng: random.Random) -> str:
    return f"+1-555-{rng.randint(1000, 9999)}"


def is_placeholder_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return PLACEHOLDER_PHONE_PATTERN.match(phone) is not None


def enhance_facility(facility: MedicalFacility, rng: random.Random) -> MedicalFacility:
    phone = facility.phone or placeholder_phone(rng)
    return facility.with_updates(name=clean_facility_name(facility.name), phone=phone)
