"""
Bundled sample data for `POST /api/admin/seed` (public-domain songs).
"""

from __future__ import annotations

SEED_ROWS: list[dict[str, object]] = [
    {
        "performer": "Traditional",
        "genre": "Folk",
        "songTitle": "Greensleeves",
        "words": "Alas, my love, you do me wrong, to cast me off discourteously.",
        "language": "en",
        "era": "1580",
        "classic": True,
    },
    {
        "performer": "Traditional",
        "genre": "Folk",
        "songTitle": "Frère Jacques",
        "words": "Frère Jacques, frère Jacques, dormez-vous? Dormez-vous?",
        "language": "fr",
        "era": "1780",
        "classic": True,
    },
    {
        "performer": "Robert Burns",
        "genre": "Folk",
        "songTitle": "Auld Lang Syne",
        "words": "Should auld acquaintance be forgot, and never brought to mind?",
        "language": "sco",
        "era": "1788",
        "classic": True,
    },
    {
        "performer": "John Newton",
        "genre": "Hymn",
        "songTitle": "Amazing Grace",
        "words": "Amazing grace! How sweet the sound that saved a wretch like me!",
        "language": "en",
        "era": "1779",
        "classic": True,
    },
    {
        "performer": "Jane Taylor",
        "genre": "Nursery",
        "songTitle": "Twinkle, Twinkle, Little Star",
        "words": "Twinkle, twinkle, little star, how I wonder what you are!",
        "language": "en",
        "era": "1806",
        "classic": False,
    },
]
