"""Core application components.

This module provides the foundational components for the Org Access API:
- Authority store connection management (membership and invitation records)
- Application settings and configuration
"""
