"""Field name normalization for client, intake, counselor and session records.

CSV exports of the same dataset have used different header spellings over
time ("FILE NUMBER", "File Number", "FILE_NUMBER", ...). Every record read
from a row source is rekeyed onto one snake_case vocabulary here, so the
rest of the service only ever sees canonical names.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from casefile.models.records import NormalizedRecord

# Mapping rules: canonical field name -> known header spellings
FIELD_NAME_MAP: Dict[str, List[str]] = {
    "file_number": ["FILE_NUMBER", "FILE NUMBER", "File Number", "FILENUMBER", "FileNumber"],
    "file_name": ["File Name", "FILE NAME", "FILE_NAME", "FILENAME", "FileName"],
    "client1_first_name": ["Client1 First Name", "CLIENT1 FIRST NAME", "Client1FirstName", "CLIENT1_FIRST_NAME"],
    "client1_last_name": ["Client1 Last Name", "CLIENT1 LAST NAME", "Client1LastName", "CLIENT1_LAST_NAME"],
    "client2_first_name": ["Client2 First Name", "CLIENT2 FIRST NAME", "Client2FirstName", "CLIENT2_FIRST_NAME"],
    "client2_last_name": ["Client2 Last Name", "CLIENT2 LAST NAME", "Client2LastName", "CLIENT2_LAST_NAME"],
    "client3_first_name": ["Client3 First Name", "CLIENT3 FIRST NAME", "Client3FirstName", "CLIENT3_FIRST_NAME"],
    "client3_last_name": ["Client3 Last Name", "CLIENT3 LAST NAME", "Client3LastName", "CLIENT3_LAST_NAME"],
    "client4_first_name": ["Client4 First Name", "CLIENT4 FIRST NAME", "Client4FirstName", "CLIENT4_FIRST_NAME"],
    "client4_last_name": ["Client4 Last Name", "CLIENT4 LAST NAME", "Client4LastName", "CLIENT4_LAST_NAME"],
    "counselor_first_name": ["Counselor First Name", "COUNSELOR FIRST NAME", "CounselorFirstName"],
    "counselor_last_name": ["Counselor Last Name", "COUNSELOR LAST NAME", "CounselorLastName"],
    "location": ["LOCATION", "Location"],
    "location_detail": ["LOCATION DETAIL", "Location Detail", "LocationDetail"],
    "therapy_type": ["THERAPY TYPE", "Therapy Type", "TherapyType"],
    "intake_date": ["INTAKE DATE", "Intake Date", "IntakeDate"],
    "end_date": ["END DATE", "End Date", "EndDate"],
    "session_date": ["Session Date", "SESSION DATE", "SessionDate"],
    "status": ["STATUS", "Status"],
    "session_status": ["Session Status", "SESSION STATUS", "SessionStatus"],
    "session_payment_status": ["Session Payment Status", "SESSION PAYMENT STATUS", "SessionPaymentStatus"],
    "emergency_contact_name": ["EMERGENCY CONTACT NAME", "Emergency Contact Name"],
    "emergency_contact_number": ["EMERGENCY CONTACT NUMBER", "Emergency Contact Number"],
    "city": ["CITY", "City"],
    "state": ["STATE", "State"],
    "street_address": ["STREET ADDRESS", "Street Address", "StreetAddress"],
    "zip": ["ZIP", "Zip", "ZIP CODE", "Zip Code"],
    "phone": ["PHONE", "Phone"],
    "dob": ["DOB", "Dob", "Date of Birth", "DATE OF BIRTH"],
    "supervision_group": ["Supervision Group", "SUPERVISION GROUP", "SupervisionGroup"],
    "payment_method": ["Payment Method", "PAYMENT METHOD", "PaymentMethod"],
    "session_fee": ["Session Fee", "SESSION FEE", "SessionFee"],
    "session_note": ["Session Note", "SESSION NOTE", "SessionNote"],
}

_VARIANT_LOOKUP: Dict[str, str] = {
    variant.lower(): canonical
    for canonical, variants in FIELD_NAME_MAP.items()
    for variant in variants
}

_WHITESPACE_RE = re.compile(r"\s+")
_NON_SLUG_RE = re.compile(r"[^a-z0-9_]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def normalize_field_name(raw_name: str) -> str:
    """Map an observed column name onto the canonical vocabulary.

    Registered spellings are matched case-insensitively. Anything else is
    slugged: lowercased, whitespace runs become ``_`` and characters outside
    ``[a-z0-9_]`` are dropped. If that leaves nothing, every non-alphanumeric
    character is replaced with ``_`` instead.

    Args:
        raw_name: Column or document field name as found in the source

    Returns:
        str: Canonical snake_case name ("" only for empty input)
    """
    if not raw_name:
        return ""

    lowered = str(raw_name).lower()
    canonical = _VARIANT_LOOKUP.get(lowered)
    if canonical:
        return canonical

    slug = _NON_SLUG_RE.sub("", _WHITESPACE_RE.sub("_", lowered))
    if slug:
        return slug
    return _NON_ALNUM_RE.sub("_", lowered)


def normalize_value(value: Any) -> Any:
    """Trim string values; None and non-strings pass through."""
    if isinstance(value, str):
        return value.strip()
    return value


def normalize_file_number(value: Any) -> str:
    """File numbers compare as trimmed strings, leading zeros included."""
    if value is None:
        return ""
    return str(value).strip()


def normalize_record(raw: Mapping[str, Any]) -> NormalizedRecord:
    """Rekey a raw row onto canonical field names.

    When two source columns collapse onto the same canonical name, the first
    non-empty value is kept.

    Args:
        raw: Row as yielded by a row source

    Returns:
        NormalizedRecord: Record keyed by canonical names
    """
    normalized: NormalizedRecord = {}
    for key, value in raw.items():
        name = normalize_field_name(key) if key is not None else ""
        if not name:
            continue
        value = normalize_value(value)
        existing: Optional[Any] = normalized.get(name)
        if name in normalized and existing not in (None, ""):
            continue
        normalized[name] = value

    if "file_number" in normalized:
        normalized["file_number"] = normalize_file_number(normalized["file_number"])

    return normalized
