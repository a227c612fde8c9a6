"""
Administrative maintenance (import, reset, seed).
"""
