"""Domain layer — claim models, property rules, and error types.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, plugins, or config.
"""
