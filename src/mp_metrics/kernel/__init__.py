"""Kernel – error hierarchy and label identity, no I/O."""
