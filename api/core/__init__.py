"""
Pieces every feature package leans on: settings, the asyncpg pool wrapper,
error types, the JSON error envelope and logging setup. Recipe SQL and rules
live in `recipes/`.
"""
