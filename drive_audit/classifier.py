"""
Internal/external classification of Drive permissions.
"""

from .models import Permission


def extract_domain(email: str) -> str:
    """
    Return the part of an email address after the last '@'.

    Only the final segment counts, so "a@b@example.com" gives "example.com".
    An address without '@' gives an empty string.
    """
    idx = email.rfind("@")
    if idx < 0:
        return ""
    return email[idx + 1:]


def is_external_share(perm: Permission, organization_domain: str) -> bool:
    """
    Decide whether a permission grants access outside the organization.

    Args:
        perm: Permission to classify
        organization_domain: The organization's domain, compared case-sensitively

    Returns:
        True for "anyone" links, for domain grants to another (or empty) domain,
        and for user/group grants whose email domain differs. User and group
        grants without an email address, and unknown permission types, are
        treated as internal.
    """
    if perm.type == "anyone":
        return True

    if perm.type == "domain":
        return perm.domain != organization_domain

    if perm.type in ("user", "group"):
        # Nothing to compare against: cannot prove the grant is external
        if not perm.email_address:
            return False
        return extract_domain(perm.email_address) != organization_domain

    return False
