"""
Destructive reset of a planned schema.

This is the explicit counterpart of the additive-only diff: it drops the
bookkeeping table, every table of the plan (in reverse declaration order, so
referencing tables go before the tables they reference) and then the
standalone enum types.
"""

from ..drivers import MIGRATIONS_TABLE, get_dialect_driver
from .plan import MigrationPlan


def enum_type_names(plan: MigrationPlan) -> list[str]:
    """Standalone enum type names used by ``plan``, in first-use order."""
    driver = get_dialect_driver(plan.dialect)
    names: list[str] = []
    for table in plan.tables:
        for column in table.columns:
            if column.is_enum:
                name = driver.enum_type_name(column)
                if name not in names:
                    names.append(name)
    return names


def generate_reset_sql(plan: MigrationPlan, include_migrations_table: bool = True) -> list[str]:
    """
    Render the statements that remove everything ``plan`` creates.

    Args:
        plan: The plan whose schema is being reset
        include_migrations_table: Also drop the bookkeeping table

    Returns:
        Ordered DROP statements
    """
    driver = get_dialect_driver(plan.dialect)
    statements = []
    if include_migrations_table:
        statements.append(driver.drop_table(MIGRATIONS_TABLE))
    for table in reversed(plan.tables):
        statements.append(driver.drop_table(table.table))
    for name in enum_type_names(plan):
        statement = driver.drop_enum_type(name)
        if statement:
            statements.append(statement)
    return statements


__all__ = ["enum_type_names", "generate_reset_sql"]
