"""Secondary social identity extraction from profile bios."""

from social.identity import extract_secondary_identity

__all__ = ["extract_secondary_identity"]
