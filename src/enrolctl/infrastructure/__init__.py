"""Infrastructure: SQLite record store, cohort config source, and client flags."""
