"""
Test support utilities for smalljob tests.

Test doubles live in :mod:`tests._support.fakes`; fixtures that wire
them together live in ``tests/conftest.py``.
"""
