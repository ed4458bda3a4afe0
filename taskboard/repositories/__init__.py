"""
Persistence adapters.

Services depend on the store interface (``load``/``save`` of a whole
document) rather than on the JSON files themselves.
"""
