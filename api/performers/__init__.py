"""
Performer endpoints, persistence, and rules.
"""
