"""Service layer — import, resolution, and the deprecated flat views.

Services may import from domain, config, and infrastructure layers.
"""
