"""
Test suite for the replica autoscaler.

Run all tests:
    pytest tests/ -v

Run with markers:
    pytest -m engine -v       # decision engine tests only
    pytest -m controller -v   # reconciler and store tests only
    pytest -m cli -v          # command line tests only
"""
