"""Static seed catalog shipped with the app."""

from __future__ import annotations

import math
import string
from dataclasses import replace
from typing import Final

from huevify.domain.model import Album, Track

SEED_ARTISTS: Final = ("The Algorithms", "Binary Beats", "Null Pointer", "Stack Overflow")
SEED_GENRES: Final = ("Pop", "Indie Rock", "Hip-Hop", "Electronic", "Jazz")
SEED_LABELS: Final = ("Huevify Records", "Algorithm Audio", "Binary Bass Inc.", "NullSet Music")
SAMPLE_MP3: Final = "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-1.mp3"

ALBUM_COUNT: Final = 4
TRACK_COUNT: Final = 20


def seeded_random(seed: int) -> float:
    """Deterministic value in [0, 1) for a given integer seed."""

    x = math.sin(seed) * 10000
    return x - math.floor(x)


def _seed_code(index: int) -> str:
    # Deterministic HUEQ so artists can reference seed tracks by code.
    letters = string.ascii_uppercase
    first = letters[int(seeded_random(index * 7) * 26)]
    second = letters[int(seeded_random(index * 13) * 26)]
    return f"{index:03d}{first}{second}{index % 10}"


def build_seed_catalog() -> tuple[tuple[Track, ...], tuple[Album, ...]]:
    """Return the seed tracks and albums; identical on every call."""

    albums = [
        Album(
            id=f"a{i}",
            title=f"Album {i}",
            artist=SEED_ARTISTS[i % len(SEED_ARTISTS)],
            covers=tuple(f"https://picsum.photos/300/300?random={i * 10 + n}" for n in (1, 2, 3)),
            track_ids=(),
            year=2020 + i,
            record_label=SEED_LABELS[i % len(SEED_LABELS)],
        )
        for i in range(1, ALBUM_COUNT + 1)
    ]
    album_tracks: list[list[str]] = [[] for _ in albums]

    tracks: list[Track] = []
    for i in range(1, TRACK_COUNT + 1):
        album_index = i % ALBUM_COUNT
        album = albums[album_index]
        track_id = f"t{i}"
        tracks.append(
            Track(
                id=track_id,
                title=f"Track Number {i}",
                artist=SEED_ARTISTS[i % len(SEED_ARTISTS)],
                album=album.title,
                cover=album.covers[0],
                duration=float(180 + math.floor(seeded_random(i) * 120)),
                url=SAMPLE_MP3,
                plays=math.floor(seeded_random(i * 100) * 500000),
                genre=SEED_GENRES[i % len(SEED_GENRES)],
                hueq=_seed_code(i),
            )
        )
        album_tracks[album_index].append(track_id)

    return tuple(tracks), tuple(
        replace(album, track_ids=tuple(ids))
        for album, ids in zip(albums, album_tracks, strict=True)
    )
