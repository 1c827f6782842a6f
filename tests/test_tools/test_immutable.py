import pytest

from unfold.tools import ImmutableDict, ImmutableADict


# Immutable dictionary


def test_dict_is_a_mapping():
    d = ImmutableDict(a=1, b=2)
    assert d == dict(a=1, b=2)
    assert len(d) == 2
    assert "a" in d
    assert d.get("c", 3) == 3
    assert sorted(d) == ["a", "b"]


def test_set_syntax():
    d = ImmutableDict(a=1)
    with pytest.raises(TypeError):
        d["b"] = 2


def test_del_syntax():
    d = ImmutableDict(a=1)
    with pytest.raises(TypeError):
        del d["a"]


def test_with_item():
    d = ImmutableDict(a=1)
    nd = d.with_item("b", 2)
    assert nd == dict(a=1, b=2)
    assert d == dict(a=1)


def test_with_item_same_value():
    val = object()
    d = ImmutableDict(a=val)
    nd = d.with_item("a", val)
    assert nd is d


def test_with_item_overwrites():
    d = ImmutableDict(a=1)
    nd = d.with_item("a", 2)
    assert nd == dict(a=2)
    assert d == dict(a=1)


def test_or():
    d = ImmutableDict(a=1)
    nd = d | dict(b=2)
    assert isinstance(nd, ImmutableDict)
    assert nd == dict(a=1, b=2)
    assert d == dict(a=1)

    assert (d | {}) is d


def test_identity_keys():
    # Keys without custom equality are distinguished by identity

    class Key:
        pass

    k1 = Key()
    k2 = Key()
    d = ImmutableDict().with_item(k1, 1).with_item(k2, 2)
    assert d[k1] == 1
    assert d[k2] == 2


def test_repr():
    d = ImmutableDict(a=1)
    assert repr(d) == "ImmutableDict({'a': 1})"


# Immutable dictionary with attribute access


def test_adict_getattr():
    d = ImmutableADict(a=1)
    assert d.a == 1
    with pytest.raises(AttributeError):
        d.b


def test_adict_with():
    d = ImmutableADict(a=1)
    nd = d.with_(b=2)
    assert isinstance(nd, ImmutableADict)
    assert nd.b == 2
    assert "b" not in d


def test_adict_with_same_values():
    val = object()
    d = ImmutableADict(a=val)
    assert d.with_(a=val) is d


def test_adict_repr():
    d = ImmutableADict(a=1)
    assert repr(d) == "ImmutableADict({'a': 1})"
