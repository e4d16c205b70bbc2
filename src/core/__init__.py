"""Core layer: configuration, domain models, interfaces and services.

The core knows nothing about httpx or the CLI.
"""
