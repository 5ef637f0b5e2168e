"""
Core package: base model, audit log, exception taxonomy, strict input
serializer fields and decimal helpers shared by the catalog, market data and
calculator apps.
"""
