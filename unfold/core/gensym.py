from collections import defaultdict
import typing


class GenSym(object):

    def __init__(self, taken_names: typing.Optional[typing.AbstractSet[str]]=None, counters: typing.Optional[typing.DefaultDict[str, int]]=None) -> None:
        self._taken_names = taken_names if taken_names is not None else frozenset()

        # Per-tag counters make the generated names of compiled expressions
        # independent of the number of constants in them,
        # so it is easier to compare the resulting source with a reference one.
        if counters is None:
            self._counters = defaultdict(lambda: 1)
        else:
            self._counters = counters.copy()

    def __call__(self, tag: str='sym') -> typing.Tuple[str, "GenSym"]:
        counter = self._counters[tag]
        while True:
            name = '__unfold_' + tag + '_' + str(counter)
            counter += 1
            if name not in self._taken_names:
                break
        counters = self._counters.copy()
        counters[tag] = counter

        return name, GenSym(taken_names=self._taken_names, counters=counters)
