"""
Tests package for the token-sale integration harness.

Unit tests run without Docker; tests marked ``integration`` start real
containers.
"""
