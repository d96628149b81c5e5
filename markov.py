from __future__ import annotations
import json
import gzip
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Tuple, Optional, Sequence, Union
import random
import os

log = logging.getLogger(__name__)


class _Marker:
    """Sequence boundary marker. Never equal to any string token."""
    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"<{self.name}>"

    def __reduce__(self):
        return self.name


START = _Marker("START")
END = _Marker("END")

Token = Union[str, _Marker]
Context = Tuple[Token, ...]


class EmptyModelError(ValueError):
    """Raised when generating from a model that was never fed."""


def tokenize(text: str) -> List[str]:
    # Whitespace only: no case folding, punctuation stays attached
    return text.split()


class MarkovChain:
    """
    Markov chain over words with START/END boundaries and weighted transitions.

    transitions: Dict[context_tuple, Dict[next_token, count]]

    A context holds the `order` most recent tokens; the first context of every
    fed sequence is (START,) * order. END only ever appears as a next token.
    """
    def __init__(self, order: int = 1):
        if order < 1:
            raise ValueError("order must be >= 1")
        self.order = order
        self.transitions: Dict[Context, Dict[Token, int]] = defaultdict(lambda: defaultdict(int))

    def __len__(self) -> int:
        return len(self.transitions)

    def is_empty(self) -> bool:
        return not self.transitions

    def feed(self, tokens: Sequence[str]):
        padded: List[Token] = [START] * self.order + list(tokens) + [END]
        for i in range(len(padded) - self.order):
            state = tuple(padded[i : i + self.order])
            nxt = padded[i + self.order]
            self.transitions[state][nxt] += 1

    def feed_str(self, text: str):
        self.feed(tokenize(text))

    def add_lines(self, lines: Iterable[str]) -> int:
        """Feed each line as its own sequence. Returns the number of lines fed."""
        fed = 0
        for line in lines:
            self.feed_str(line.rstrip("\r\n"))
            fed += 1
        log.debug("fed %d lines, %d contexts", fed, len(self.transitions))
        return fed

    def count(self, context: Union[Token, Context], token: Token) -> int:
        if not isinstance(context, tuple):
            context = (context,)
        dist = self.transitions.get(context)
        if not dist:
            return 0
        return dist.get(token, 0)

    def merge(self, other: "MarkovChain"):
        """Add every count of `other` into this chain."""
        if other.order != self.order:
            raise ValueError(f"cannot merge order {other.order} into order {self.order}")
        for state, next_map in other.transitions.items():
            mine = self.transitions[state]
            for tok, count in next_map.items():
                mine[tok] += count

    def _next_weighted(self, state: Context, rng: random.Random) -> Token:
        dist = self.transitions.get(state)
        if not dist:
            # Every non-END token that was ever fed is followed by something
            raise KeyError(state)
        total = sum(dist.values())
        r = rng.randrange(total)
        cum = 0
        for tok, count in dist.items():
            cum += count
            if r < cum:
                return tok
        raise AssertionError("weighted choice fell through")

    def generate(self, rng: Optional[random.Random] = None) -> List[str]:
        if self.is_empty():
            raise EmptyModelError("model is empty, feed at least one line first")
        rng = rng or random.Random()
        state: Context = (START,) * self.order
        out: List[str] = []
        while True:
            nxt = self._next_weighted(state, rng)
            if nxt is END:
                return out
            out.append(nxt)
            state = state[1:] + (nxt,)

    def generate_str(self, rng: Optional[random.Random] = None) -> str:
        return " ".join(self.generate(rng))

    def to_dict(self) -> dict:
        # START inside a context and END inside a next-list are both stored as null
        transitions_serialized = [
            {
                "context": [None if tok is START else tok for tok in state],
                "next": [[None if tok is END else tok, count] for tok, count in next_map.items()],
            }
            for state, next_map in self.transitions.items()
        ]
        return {
            "version": 1,
            "order": self.order,
            "transitions": transitions_serialized,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MarkovChain":
        version = data.get("version", 1)
        if version != 1:
            raise ValueError(f"unsupported model version: {version}")
        mc = cls(order=int(data.get("order", 1)))
        for entry in data.get("transitions", []):
            state = tuple(START if tok is None else tok for tok in entry["context"])
            next_map = mc.transitions[state]
            for tok, count in entry["next"]:
                next_map[END if tok is None else tok] += int(count)
        return mc

    def save(self, path: str):
        """
        Save as JSON or gzipped JSON, based on file extension.
        - .json -> plain JSON
        - .json.gz or .gz -> gzipped JSON
        """
        data = self.to_dict()
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        if path.endswith(".gz"):
            with gzip.open(path, "wt", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
        else:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)

    @classmethod
    def load(cls, path: str) -> "MarkovChain":
        if path.endswith(".gz"):
            with gzip.open(path, "rt", encoding="utf-8") as f:
                data = json.load(f)
        else:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        return cls.from_dict(data)
