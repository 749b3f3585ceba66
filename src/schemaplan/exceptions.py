"""
schemaplan exceptions.

Custom exception hierarchy for the package.
"""


class SchemaPlanError(Exception):
    """Base exception for all schemaplan errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ModelDefinitionError(SchemaPlanError):
    """Raised when a model definition is malformed or conflicts with another."""

    def __init__(self, message: str, model: str | None = None):
        self.model = model
        super().__init__(message)


class UnsupportedDialectError(SchemaPlanError):
    """Raised when no driver exists for the requested dialect."""

    def __init__(self, dialect: str):
        self.dialect = dialect
        super().__init__(f"Unsupported dialect: {dialect!r}. Expected one of: postgres, mysql, sqlite.")


__all__ = ["ModelDefinitionError", "SchemaPlanError", "UnsupportedDialectError"]
