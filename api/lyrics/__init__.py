"""
Lyric endpoints, search, and persistence.
"""
