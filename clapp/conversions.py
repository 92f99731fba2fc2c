"""
clapp type conversions.

A ConversionRegistry maps a value type tag to a converter (raw text -> typed
value) and to the value an option holds before anything was assigned to it.

Built-in tags (module-level `converters`)
- str:   identity
- int:   int(raw), fails on non-numeric text
- float: float(raw), fails on non-numeric text
- bool:  permissive policy, see to_bool()

Tags are any hashable object; registering a converter under a new tag makes it
usable as Option(type=tag). A plain callable that was never registered is also
accepted as a tag and is used directly as its own converter.

Each ArgumentParser owns a child registry of `converters`, so converters
registered on a parser never leak into other parsers.

Quick example:
    >>> import pathlib
    >>> registry = ConversionRegistry(converters)
    >>> registry.register("path", pathlib.Path)
    >>> registry.convert("path", "out.txt")
    PosixPath('out.txt')
"""
from collections.abc import Hashable

from .faults import ConversionError, FaultCode
from .utils import Unset, rename


def to_bool(raw, /):
    """
    Permissive boolean conversion.

    "", "1" and "true" convert to True; any other text (including "false",
    "0", "no" and garbage) converts to False. Never fails.
    """
    return raw in ("", "1", "true")


class ConversionRegistry:
    """
    Table of converters indexed by type tag, with an optional parent fallback.

    Lookups walk up the parent chain; registrations only touch this registry.
    """

    def __init__(self, parent=Unset, /):
        if not isinstance(parent, ConversionRegistry | Unset):
            raise TypeError("ConversionRegistry() argument must be a ConversionRegistry")
        self._parent = parent
        self._converters = {}
        self._initials = {}

    def register(self, tag, converter=Unset, /, *, initial=Unset):
        """
        Register a converter for a type tag.

        Forms
        - registry.register(tag, converter, initial=...)
        - @registry.register(tag, initial=...) applied to a converter function

        Parameters
        - tag: Hashable identifying the value type.
        - converter: Callable[[str], Any]; ValueError, TypeError and LookupError
          (KeyError, IndexError) signal malformed input.
        - initial: value held by options of this type before assignment
          (None when omitted).
        """
        if not isinstance(tag, Hashable):
            raise TypeError("register() first argument must be hashable")

        if converter is Unset:
            @rename("register")
            def wrapper(converter, /):
                self.register(tag, converter, initial=initial)
                return converter
            return wrapper

        if not callable(converter):
            raise TypeError("register() second argument must be callable")
        self._converters[tag] = converter
        self._initials[tag] = None if initial is Unset else initial

    def _lookup(self, tag):
        registry = self
        while registry is not Unset:
            if tag in registry._converters:
                return registry._converters[tag], registry._initials[tag]
            registry = registry._parent
        raise KeyError(tag)

    def __contains__(self, tag):
        try:
            self._lookup(tag)
        except (KeyError, TypeError):
            return False
        return True

    def supports(self, tag, /):
        """
        Whether 'tag' can be used as an option type (registered or callable).
        """
        return tag in self or callable(tag)

    def initial(self, tag, /):
        """
        Value an option of type 'tag' holds before anything was assigned.
        """
        try:
            return self._lookup(tag)[1]
        except (KeyError, TypeError):
            return None

    def convert(self, tag, raw, /):
        """
        Convert raw text to the value type identified by 'tag'.

        Raises
        - ConversionError (chained from the converter's ValueError, TypeError
          or LookupError)
          when the text is malformed for the type.
        - KeyError when the tag is neither registered nor callable.
        """
        try:
            converter, _ = self._lookup(tag)
        except KeyError:
            if not callable(tag):
                raise
            converter = tag

        try:
            return converter(raw)
        except (ValueError, TypeError, LookupError) as exception:
            name = getattr(tag, "__name__", repr(tag))
            raise ConversionError(
                "cannot convert %r to %s" % (raw, name),
                title="unconvertible value",
                code=FaultCode.UNCONVERTIBLE_VALUE,
                raw=raw,
                type=tag,
                hint="provide a value of type %s" % name,
            ) from exception

    def __repr__(self):
        return f"{type(self).__name__}({", ".join(
            getattr(tag, "__name__", repr(tag)) for tag in self._converters
        )})"


converters = ConversionRegistry()
converters.register(str, str, initial="")
converters.register(int, int, initial=0)
converters.register(float, float, initial=0.0)
converters.register(bool, to_bool, initial=False)


__all__ = (
    "ConversionRegistry",
    "converters",
    "to_bool",
)
