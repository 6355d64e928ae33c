"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL. Snapshots are written by the acquisition job;
the analysis only reads them.
"""
# All tables that exist in the DB. Must match models and alembic/versions.
ALL_TABLE_NAMES = (
    "class_snapshots",
)
