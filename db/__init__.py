"""
Database utilities and seeding.

Runtime DB access lives in the services. This package is for repo-level DB operations:
- Store protocol and the MongoDB implementation
- JSON fixture seeder (one file per collection)
"""
