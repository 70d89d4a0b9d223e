import collections.abc
import typing


class ReprStrMixin:
    """A mixin class that provides support for `__repr__` and `__str__`.

    Subclasses define `__str__` to describe themselves; this class builds an
    unambiguous `__repr__` by prefixing that string with the module-qualified
    class name.
    """

    def __str__(self) -> str:
        """A simplified representation of this object."""
        return object.__repr__(self)

    def __repr__(self) -> str:
        """An unambiguous representation of this object."""
        module = f"{self.__module__.replace('unitgraph.', '')}."
        name = self.__class__.__qualname__
        return f"{module}{name}({self})"


class MappingBase(collections.abc.Mapping):
    """A partial implementation of `collections.abc.Mapping`.

    This abstract base class is designed to serve as a basis for easily creating
    concrete implementations of `collections.abc.Mapping`. It defines simple
    implementations, based on a user-provided collection, for the abstract
    methods `__len__` and `__iter__` but leaves `__getitem__` abstract.

    Examples
    --------
    The following class implements `collections.abc.Mapping`::

        class Implemented(MappingBase):

            def __init__(self, mapping: Mapping) -> None:
                __mapping = mapping or {}
                super().__init__(__mapping.keys())
                self.__mapping = __mapping

            def __getitem__(self, k: Any):
                if k in self.__mapping:
                    return self.__mapping[k]
                raise KeyError(k)

    Because the base collection is held by reference, a concrete class that
    later updates its underlying mapping will see those updates reflected in
    `len` and iteration.
    """

    def __init__(self, __collection: typing.Collection) -> None:
        """Initialize this instance with the base collection.

        Parameters
        ----------
        __collection
            Any concrete implementation of `collections.abc.Collection`. This
            attribute's implementations of the required collection methods will
            support the equivalent implementations for this mapping.
        """
        self._collection = __collection

    def __len__(self) -> int:
        """The number of members in this collection."""
        return len(self._collection)

    def __iter__(self) -> typing.Iterator:
        """Iterate over members of this collection."""
        return iter(self._collection)
