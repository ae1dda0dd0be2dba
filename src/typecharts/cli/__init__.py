"""Command-line interface for typecharts."""
