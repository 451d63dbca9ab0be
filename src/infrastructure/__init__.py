"""Infrastructure Layer.

Adapters that handle I/O (map files, encoders, command line) and coordinate
domain operations.
"""
