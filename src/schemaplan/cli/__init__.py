"""
schemaplan Command Line Interface.

Provides migration planning commands:
- plan: Print the migration plan of the current models
- generate: Write (or print) the SQL migration since the last snapshot
- hash: Print the canonical plan hash
- status: Compare the models with the saved snapshot
- reset: Print the statements that drop the planned schema
- bookkeeping: Print the migrations table DDL and queries
"""

from .commands import cli, main

__all__ = ["cli", "main"]
