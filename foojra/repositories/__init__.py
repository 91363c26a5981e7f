"""
Persistence adapters.

These modules encapsulate how data is stored/retrieved (today one JSON file per
collection). Services should depend on the stores rather than touching files.
"""
