"""Immutable, case-insensitive HTTP headers.

Implements ``Mapping[str, str]`` over the raw byte pairs of an ASGI
scope. Names are lowercased once, at construction; lookups are dict hits.
"""

from collections.abc import Iterator, Mapping


def _decode(value: bytes) -> str:
    return value.decode("latin-1")


class Headers(Mapping[str, str]):
    """Case-insensitive view of request headers.

    ``headers["Accept"]`` is the first value sent. Keys iterate
    lowercased, in arrival order.
    """

    __slots__ = ("_index",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        index: dict[str, str] = {}
        for name, value in raw:
            index.setdefault(_decode(name).lower(), _decode(value))
        self._index = index

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> "Headers":
        """Build Headers from a plain ``{name: value}`` mapping."""
        return cls(
            tuple(
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            )
        )

    def __getitem__(self, key: str) -> str:
        try:
            return self._index[key.lower()]
        except KeyError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{name!r}: {value!r}" for name, value in self._index.items())
        return f"Headers({{{pairs}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """First value for *key*, or *default*."""
        return self._index.get(key.lower(), default)

