"""Service layer: use cases orchestrated over units of work.

Import services from their subpackages, e.g.
``from ptstudio.services.categories import CategoryService``.
"""
