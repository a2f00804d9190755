"""
Core domain entities.

Import entities from their modules (``src.core.entities.bill`` etc.).
Bill items compute their amounts with ``src.core.services.calculator``,
which itself imports ``DiscountType`` from this package, so nothing is
re-exported here.
"""
