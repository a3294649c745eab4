"""
Test package for clustercode.

Unit tests run against the in-memory filesystem; a few tests and the
regression suite use real temporary directories.
"""
