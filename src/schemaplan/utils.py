import re

# Shared identifier validation regex, used by the model definitions.
SAFE_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

_SLUG_INVALID_RE = re.compile(r"[^a-z0-9_-]+")


def validate_identifier(name: str, context: str = "identifier") -> None:
    """Validate that a string is a safe SQL identifier.

    Raises:
        ValueError: If the name contains characters outside ``[a-zA-Z0-9_]``
            or does not start with a letter/underscore.
    """
    if not SAFE_IDENTIFIER_RE.match(name):
        raise ValueError(
            f"Invalid {context}: {name!r}. "
            "Only letters, digits, and underscores are allowed "
            "(must start with a letter or underscore)."
        )


def escape_single_quotes(value: str) -> str:
    """Escape single quotes for embedding in SQL string literals.

    All supported dialects accept doubled single quotes (``''``) inside
    single-quoted strings.
    """
    return value.replace("'", "''")


def quote_literal(value: str) -> str:
    """Render ``value`` as a single-quoted SQL string literal."""
    return f"'{escape_single_quotes(value)}'"


def slugify(name: str) -> str:
    """
    Turn a free-form name into a file-name-safe slug.

    Examples:
        slugify("Create users table")  # "create-users-table"
        slugify("alter-posts-user_id") # "alter-posts-user_id"
    """
    slug = name.strip().lower().replace(" ", "-")
    slug = _SLUG_INVALID_RE.sub("", slug)
    return slug.strip("-") or "migration"


def capitalize_first(value: str) -> str:
    """Upper-case the first character only (``"user_profile"`` -> ``"User_profile"``)."""
    return value[:1].upper() + value[1:]
