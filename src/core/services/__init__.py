"""
Core business logic services.

Layer-pure services that depend only on:
- src/core/entities/*
- src/core/interfaces/*
- src/core/exceptions.py

NO infrastructure imports. Import services from their modules directly;
the entities depend on the calculator, so this package stays empty.
"""
