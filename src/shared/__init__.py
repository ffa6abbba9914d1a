"""Shared utilities and cross-domain components.

This module contains utilities used across multiple domains:
- Fault classes for consistent error handling
- Role catalog and the permission engine
"""
