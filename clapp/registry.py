"""
clapp option registry.

The registry is the parser's table of declared options:
- an ordered sequence (declaration order drives positional matching and help),
- a key -> option index for named options (keys are globally unique),
- a display name -> option index for positional options.
"""
from .faults import DeclarationError, FaultCode
from .options import Option


class OptionRegistry:
    """
    Ordered table of options indexed by key and by positional display name.
    """

    def __init__(self):
        self._options = []
        self._keys = {}
        self._names = {}

    def add(self, option, /):
        """
        Register an option.

        Raises
        - TypeError: when 'option' is not an Option.
        - DeclarationError: when one of its keys is already used by another
          option, when its positional display name is already in use, or when
          it is already registered.
        """
        if not isinstance(option, Option):
            raise TypeError("add() argument must be an option")
        if any(option is other for other in self._options):
            raise DeclarationError(
                f"option {option.name!r} is already registered",
                title="invalid declaration",
                code=FaultCode.INVALID_DECLARATION,
                option=option,
            )

        for key in option.keys:
            if key in self._keys:
                raise DeclarationError(
                    f"option key {key!r} is already used by {self._keys[key].name!r}",
                    title="duplicated key",
                    code=FaultCode.INVALID_DECLARATION,
                    option=option,
                    hint="every key must belong to exactly one option",
                )
        if option.positional and option.metavar in self._names:
            raise DeclarationError(
                f"positional name {option.metavar!r} is already in use",
                title="duplicated positional",
                code=FaultCode.INVALID_DECLARATION,
                option=option,
            )

        self._options.append(option)
        if option.positional:
            self._names[option.metavar] = option
        else:
            self._keys.update(dict.fromkeys(option.keys, option))
        return option

    def lookup(self, key, /):
        """
        Return the named option for 'key', or None when no option uses it.
        """
        return self._keys.get(key)

    @property
    def positionals(self):
        """
        Positional options in declaration order.
        """
        return tuple(option for option in self._options if option.positional)

    @property
    def keys(self):
        """
        Every registered key, in declaration order.
        """
        return tuple(self._keys)

    def __getitem__(self, name):
        try:
            return self._keys[name]
        except KeyError:
            return self._names[name]

    def __contains__(self, name):
        return name in self._keys or name in self._names

    def __iter__(self):
        return iter(tuple(self._options))

    def __len__(self):
        return len(self._options)

    def __repr__(self):
        return f"{type(self).__name__}({", ".join(option.name for option in self._options)})"


__all__ = (
    "OptionRegistry",
)
