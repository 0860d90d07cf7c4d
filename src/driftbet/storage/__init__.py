"""DuckDB persistence: paper venue ledger and paper-trading journal."""
