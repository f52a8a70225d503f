"""
Test suite for Smart Paste.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_field_matcher.py -v
"""
