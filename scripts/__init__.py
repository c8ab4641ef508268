"""Bookstore scripts.

This directory contains the bookstore seeding, query and validation scripts.

Scripts

| Script | Purpose |
|--------|---------|
| `seed_books.py` | Replaces the books collection with the built-in catalogue |
| `run_queries.py` | Runs the query set (filters, sorts, aggregation, indexes) |
| `validate_seed.py` | Verifies the collection matches the catalogue |

Usage

```bash
# Seed, check, then run the query set
seed-books
validate-seed
run-queries

# Against another server or database
seed-books --uri mongodb://db.example:27017 --database bookstore_dev
```
"""
