"""
Death Logger for World of Warcraft

Attributes a killer to each death of a tracked character by correlating
recent combat log damage, and keeps a bounded history of death records
with location, inventory, money and identity snapshots.
"""

__version__ = "0.1.0"
__author__ = "Death Logger Team"
