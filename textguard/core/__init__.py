"""Core components for textguard.

This package contains the building blocks of the validation engine: the
error catalog, character classes, the rule set and its builder, the base
validator, the scan and hook pipeline, and the configuration manager.
"""
