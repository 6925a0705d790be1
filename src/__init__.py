"""Bookstore Directory package.

This module is the root of the Bookstore Directory Python package, which
turns a flat bookstore CSV export into validated, query-able records for a
static bookstore directory website.

Package Structure
-----------------
- `pipeline/csv_ingest/`:
    CSV reading, column mapping, opening-hours unpacking and schema
    validation. Produces validated records plus a per-row error list.
- `pipeline/directory/`:
    Record processing, slugs, province/city grouping, opening-hours checks,
    fuzzy search with compound filters, JSON export and the headless runner.
- `build_directory.py`: Command-line entrypoint.
- `config.py`: All configuration constants, as UPPER_SNAKE_CASE.
- `exceptions.py`: Project-specific exception classes.

Examples
--------
>>> import src
>>> # See src.build_directory or src.pipeline.directory.runner for entrypoints.
"""
