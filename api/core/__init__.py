"""
Plumbing shared by the performer, lyric and admin packages: settings and
schema profiles, the SQLite/Postgres store, table creation, input
normalizers, the `{"error": ...}` handlers and logging setup.
"""
