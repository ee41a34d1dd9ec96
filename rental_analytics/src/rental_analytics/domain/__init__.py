"""Domain layer: entities, value objects and the aggregation engine.

The domain has no dependency on storage, configuration or observability.
"""
