"""
Market Signal Engine Test Suite

This package contains all tests for the Market Signal Engine, organized by category:
- unit: Unit tests for individual components
- integration: Integration tests for component interactions
"""
