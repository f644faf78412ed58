"""
Configuration management for the Files Manager.

Contains the Pydantic settings shared by the API server, the CLI and the
thumbnail workers.
"""
