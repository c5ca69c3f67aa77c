"""
URL shortener service: Base62 short keys over SQLite-assigned identifiers.
"""
