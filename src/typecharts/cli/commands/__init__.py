"""CLI command groups for typecharts.

Command groups:
- auth: Stored credential management
- inspect: Event and property definition listing
- query: Live trend queries
"""
