# =============================================================================
# taskhub_core/data/schema.py
# SQL for the Supabase tables and their row-level security policies
# =============================================================================
"""
Supabase cannot create tables through the Python client; this SQL is meant
for the Supabase SQL Editor (see scripts/create_tables.py).

Two policy sets are provided:
- development: every request may read and write every row
- production: rows are readable and writable only by the owner; inserts must
  carry the caller's own uid in ``user_id``
"""

from typing import Dict

TABLES: Dict[str, str] = {
    "tasks": """
CREATE TABLE IF NOT EXISTS tasks (
    id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    date TEXT DEFAULT '',
    completed BOOLEAN DEFAULT FALSE,
    user_id TEXT NOT NULL DEFAULT 'anonymous',
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);
""",
    "products": """
CREATE TABLE IF NOT EXISTS products (
    id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    price NUMERIC(12, 2) NOT NULL,
    category TEXT DEFAULT '',
    user_id TEXT NOT NULL DEFAULT 'anonymous',
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);
CREATE INDEX IF NOT EXISTS idx_products_created_at ON products(created_at DESC);
""",
}

DEVELOPMENT_POLICY = """
ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;
CREATE POLICY "{table}: allow all" ON {table}
FOR ALL
USING (true)
WITH CHECK (true);
GRANT ALL ON {table} TO authenticated;
GRANT ALL ON {table} TO anon;
"""

PRODUCTION_POLICY = """
ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;
CREATE POLICY "{table}: owner read/write" ON {table}
FOR ALL
USING (auth.uid() IS NOT NULL AND user_id = auth.uid()::text)
WITH CHECK (auth.uid() IS NOT NULL AND user_id = auth.uid()::text);
GRANT ALL ON {table} TO authenticated;
"""

POLICIES = {
    "development": DEVELOPMENT_POLICY,
    "production": PRODUCTION_POLICY,
}


def get_schema_sql(mode: str = "development") -> str:
    """
    Build the full setup script for both tables.

    Args:
        mode: "development" (permissive) or "production" (owner-scoped)

    Raises:
        ValueError: unknown mode
    """
    if mode not in POLICIES:
        raise ValueError(f"Unknown policy mode: {mode} (expected one of {sorted(POLICIES)})")

    parts = []
    for table, ddl in TABLES.items():
        parts.append(f"-- {table} ".ljust(76, "="))
        parts.append(ddl.strip())
        parts.append(POLICIES[mode].format(table=table).strip())
    return "\n\n".join(parts) + "\n"
