"""
Dice - Injectable sources of die faces.

`roll` is the only nondeterministic transition. It draws faces from a
FaceSource so games can be seeded and tests can script exact throws.
"""

from __future__ import annotations
from collections.abc import Iterable
from typing import Protocol
import random

from .state import Face, FACES


class FaceSource(Protocol):
    """Anything that can produce the next die face."""

    def next_face(self) -> Face:
        ...


class RandomFaceSource:
    """Uniform draws over all six faces, optionally seeded."""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next_face(self) -> Face:
        return self._rng.choice(FACES)


class ScriptedFaceSource:
    """
    Replays a fixed sequence of faces.

    Raises RuntimeError once the script runs out so a test that rolls
    more dice than it scripted fails loudly.
    """

    def __init__(self, faces: Iterable[Face | str | int]):
        self._faces = [Face.parse(f) for f in faces]
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._faces) - self._pos

    def extend(self, faces: Iterable[Face | str | int]) -> None:
        self._faces.extend(Face.parse(f) for f in faces)

    def next_face(self) -> Face:
        if self._pos >= len(self._faces):
            raise RuntimeError("Scripted face source exhausted")
        face = self._faces[self._pos]
        self._pos += 1
        return face
