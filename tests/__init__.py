"""
Tests for the death logger: damage window, killer attribution, record
store, combat log parsing, persistence and the command-line interface.
"""
