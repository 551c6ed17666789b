"""Core Application Layer: orchestrates the review operations.

Connects the domain layer with the infrastructure layer and exposes the
ReviewClient facade used by the rest of an application.
"""
