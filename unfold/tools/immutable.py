"""
Immutable data structures.

The substitution environment of the unfolding pass and the state of the tree walkers
are kept in these, so that a nested scope can be created by adding items
without affecting the enclosing one.
"""
from typing import Any, TypeVar, Mapping, Iterator


_Key = TypeVar("_Key")
_Val = TypeVar("_Val")


class ImmutableDict(Mapping[_Key, _Val]):
    """
    An immutable version of ``dict``.

    Mutating syntax (``del d[k]``, ``d[k] = v``) is not available;
    the pure method ``with_item`` returns a new dictionary instead.
    If a method does not change the dictionary,
    the source dictionary itself is returned.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._dict = dict(*args, **kwargs)

    def __getitem__(self, key: object) -> _Val:
        return self._dict[key]

    def __contains__(self, key: object) -> bool:
        return key in self._dict

    def __iter__(self) -> Iterator[_Key]:
        return iter(self._dict)

    def __len__(self) -> int:
        return len(self._dict)

    def __or__(self, other: Mapping[_Key, _Val]) -> "ImmutableDict[_Key, _Val]":
        if len(other) == 0:
            return self
        new = dict(self._dict)
        new.update(other)
        return self.__class__(new)

    def with_item(self, key: _Key, val: _Val) -> "ImmutableDict[_Key, _Val]":
        if key in self._dict and self._dict[key] is val:
            return self
        new = dict(self._dict)
        new[key] = val
        return self.__class__(new)

    def __repr__(self):
        return f"ImmutableDict({repr(self._dict)})"


class ImmutableADict(ImmutableDict[str, _Val]):
    """
    A subclass of ``ImmutableDict`` with values being accessible as attributes
    (e.g. ``d['a']`` is equivalent to ``d.a``).
    """

    def __getattr__(self, attr: str) -> _Val:
        try:
            return self._dict[attr]
        except KeyError as exc:
            raise AttributeError(attr) from exc

    def with_(self, **kwds: _Val) -> "ImmutableADict[_Val]":
        # Values are compared with `is` to avoid lengthy equality checks;
        # an update with equal but distinct objects creates a new dictionary.
        if all(key in self._dict and self._dict[key] is val for key, val in kwds.items()):
            return self
        new = dict(self._dict)
        new.update(**kwds)
        return self.__class__(new)

    def __repr__(self):
        return f"ImmutableADict({repr(self._dict)})"
