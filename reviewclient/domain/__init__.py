"""Domain Layer: value objects, request outcomes, review models and events.

Has no dependency on the infrastructure layer.
"""
