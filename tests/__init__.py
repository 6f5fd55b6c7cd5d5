"""Test suite package marker so nested test modules import as ``tests.*``."""
