"""
Identity Normalizers — Canonical forms of customer email and phone for matching.
"""
import re

_PHONE_NOISE = re.compile(r"[\s()\-]")

# Every character str.isspace() accepts; re's \s and str.strip() use the same set
WHITESPACE_CHARS = (
    "\t\n\x0b\x0c\r\x1c\x1d\x1e\x1f\x20\x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)


def normalize_email(email) -> str:
    """Lowercase and trim an email. Empty or missing input → ''."""
    if email is None:
        return ""
    return str(email).strip().lower()


def normalize_phone(phone) -> str:
    """Strip whitespace, parentheses and hyphens from a phone number.

    Spreadsheet exports often store phone numbers as numbers, so an integral
    float such as 919876543210.0 is rendered without its fractional part.
    """
    if phone is None:
        return ""
    if isinstance(phone, float) and phone.is_integer():
        phone = int(phone)
    return _PHONE_NOISE.sub("", str(phone)).strip()
