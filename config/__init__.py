"""Monty Hall simulator settings and run schema."""
