"""Domain layer: items, containers, ordering rules, gesture state.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
