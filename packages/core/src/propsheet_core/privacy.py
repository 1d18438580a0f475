"""Sensitive-information filter for broker-facing listing detail.

Brokers see a redacted copy of each listing line; admins see the raw line.
The contact-keyword pass runs first and takes the number that follows the
label with it, so "call 98765 43210" leaves no orphaned label or digits.
Phone numbers without a label go in the next pass.
"""

import re

from .text import collapse_whitespace


# Optional +country code and (area code) in front of one of:
# 98765 43210, 987 654 3210, 011 2345 6789, 98765-43210 / 011.2345.6789,
# or a bare 8-11 digit run. Space-joined groups only chain in these shapes
# so sizes such as "1200 1350 1500" are never read as one number.
PHONE_BODY = (
    r"(?:\+\d{1,3}[-.\s]?)?"
    r"(?:\(\d{1,5}\)[-.\s]?)?"
    r"(?:"
    r"\d{5}\s\d{5}"
    r"|\d{3}\s\d{3}\s\d{4}"
    r"|0\d{2,4}\s\d{3,4}\s?\d{4}"
    r"|\d{2,5}(?:[-.]\d{2,5}){1,3}"
    r"|\d{8,11}"
    r")"
    r"(?!\d)"
)
PHONE_PATTERN = re.compile(r"(?<!\d)" + PHONE_BODY)
LONG_DIGIT_RUN = re.compile(r"\d{7,}")

CONTACT_KEYWORD_PATTERN = re.compile(
    r"\b(?:contact|call|phone|mobile|mob|tel|whatsapp)\b(?:\s*no\b\.?)?\s*:?"
    r"(?:\s*(?:" + PHONE_BODY + r"|\d+))?",
    re.IGNORECASE,
)

# Keyword is case-insensitive; the name must start with a capital letter
ATTRIBUTION_PATTERN = re.compile(
    r"\b(?i:builder|owner|proprietor|developer|by)\b\s*:?\s*"
    r"[A-Z][A-Za-z]+(?:\s+[A-Z][A-Za-z]+){0,2}"
)

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
AT_TOKEN = re.compile(r"\S*@\S*")

# Separated groups need a full number's worth of digits; "1200-1500" stays
MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15


def _strip_phone(match: re.Match) -> str:
    text = match.group(0)
    if text.isdigit():
        return " "
    digits = sum(ch.isdigit() for ch in text)
    if MIN_PHONE_DIGITS <= digits <= MAX_PHONE_DIGITS:
        return " "
    return text


def remove_phone_numbers(text: str) -> str:
    """Remove phone-number-shaped substrings and any 7+ digit run."""
    text = PHONE_PATTERN.sub(_strip_phone, text)
    return LONG_DIGIT_RUN.sub(" ", text)


def remove_contact_keywords(text: str) -> str:
    """Remove contact/call/phone/mobile/tel/whatsapp labels and the number after them."""
    return CONTACT_KEYWORD_PATTERN.sub(" ", text)


def remove_attributions(text: str) -> str:
    """Remove builder/owner/developer name attributions."""
    return ATTRIBUTION_PATTERN.sub(" ", text)


def remove_emails(text: str) -> str:
    """Remove email addresses and any other @-bearing token."""
    text = EMAIL_PATTERN.sub(" ", text)
    return AT_TOKEN.sub(" ", text)


REDACTION_PASSES = (
    remove_contact_keywords,
    remove_phone_numbers,
    remove_attributions,
    remove_emails,
)


def filter_sensitive_info(raw_line: str) -> str:
    """Return the broker-facing copy of a listing line.

    The result has no run of seven or more digits and no token containing
    "@". The input string is left untouched.

    >>> filter_sensitive_info("B-5 150 SQFT 2BR contact 9876543210")
    'B-5 150 SQFT 2BR'
    """
    filtered = raw_line
    for redact in REDACTION_PASSES:
        filtered = redact(filtered)
    return collapse_whitespace(filtered)


__all__ = [
    "filter_sensitive_info",
    "remove_attributions",
    "remove_contact_keywords",
    "remove_emails",
    "remove_phone_numbers",
]
