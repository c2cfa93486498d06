"""Utility functions for the group blueprint."""

import secrets

from campusrides.core.constants import GROUP_ID_ALPHABET, GROUP_ID_LENGTH


def generate_group_id(length=GROUP_ID_LENGTH):
    """Return a random URL-safe group code."""
    return "".join(secrets.choice(GROUP_ID_ALPHABET) for _ in range(length))
