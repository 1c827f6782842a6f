"""
Members that can be read off runtime values.

A closed set of lookups used by :py:class:`~unfold.core.nodes.MemberAccess` nodes:
attribute reads (covering both plain fields and properties) and item reads
(used for namespaces such as module globals, and for constant-keyed subscripts).
"""
import typing

from unfold.errors import MemberLookupError


class Member:
    """
    Base class for members.

    .. attribute:: owner

        An object the member is read off when there is no receiver expression
        (a static read), or ``None``.
    """

    def __init__(self, owner: typing.Any = None) -> None:
        self.owner = owner

    def read(self, obj: typing.Any) -> typing.Any:
        """
        Returns the value of this member of ``obj``.
        """
        raise NotImplementedError

    def read_static(self) -> typing.Any:
        """
        Returns the value of this member of :py:attr:`owner`.
        """
        if self.owner is None:
            raise MemberLookupError("A static read of {member} requires an owner".format(member=self))
        return self.read(self.owner)


class Attribute(Member):
    """
    An attribute (field or property) with the name ``name``.
    """

    def __init__(self, name: str, owner: typing.Any = None) -> None:
        super().__init__(owner=owner)
        self.name = name

    def read(self, obj):
        # Property getters can raise any exception
        try:
            return getattr(obj, self.name)
        except Exception as exc:
            raise MemberLookupError(
                "Cannot read attribute {name!r} of {obj!r}".format(name=self.name, obj=obj)
            ) from exc

    def __eq__(self, other):
        return (
            type(other) == type(self)
            and self.name == other.name
            and self.owner is other.owner)

    def __hash__(self):
        return hash((type(self), self.name, id(self.owner)))

    def __repr__(self):
        if self.owner is None:
            return "Attribute({name})".format(name=repr(self.name))
        return "Attribute({name}, owner={owner})".format(
            name=repr(self.name), owner=repr(self.owner))


class Item(Member):
    """
    An item with the key ``key`` (that is, ``obj[key]``).
    """

    def __init__(self, key: typing.Hashable, owner: typing.Any = None) -> None:
        super().__init__(owner=owner)
        self.key = key

    def read(self, obj):
        try:
            return obj[self.key]
        except Exception as exc:
            raise MemberLookupError(
                "Cannot read item {key!r} of {obj!r}".format(key=self.key, obj=obj)
            ) from exc

    def __eq__(self, other):
        return (
            type(other) == type(self)
            and type(self.key) == type(other.key)
            and self.key == other.key
            and self.owner is other.owner)

    def __hash__(self):
        return hash((type(self), self.key, id(self.owner)))

    def __repr__(self):
        if self.owner is None:
            return "Item({key})".format(key=repr(self.key))
        return "Item({key}, owner={owner})".format(key=repr(self.key), owner=repr(self.owner))
