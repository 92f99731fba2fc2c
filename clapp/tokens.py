"""
clapp token pre-processing.

- split(token): separate an inline assignment "key=value" at the first '='.
- TokenStream: the working queue of the scan. It remembers, for every token,
  the 1-based position of the argv entry it came from, so a value split off
  "--cfg=config.json" still reports the position of "--cfg=config.json".
"""
from collections import deque


def split(token, /):
    """
    Split an inline assignment at its first '='.

    Returns
    - (key, value) when the token contains '=' (value may be empty, and may itself contain '=').
    - (token, None) otherwise.

    Examples
    - split("--cfg=config.json") -> ("--cfg", "config.json")
    - split("--cfg=")            -> ("--cfg", "")
    - split("--expr=a=b")        -> ("--expr", "a=b")
    - split("file.txt")          -> ("file.txt", None)
    """
    key, separator, value = token.partition("=")
    if not separator:
        return token, None
    return key, value


class TokenStream:
    """
    Queue of (token, position) pairs consumed left to right.

    The program name (argv[0]) is not part of the stream; positions still count
    it, so the first real token is at position 1.
    """

    def __init__(self, argv, /):
        if isinstance(argv, str):
            raise TypeError("TokenStream() argument must be an iterable of strings, not a string")
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("TokenStream() argument must be an iterable of strings")
        self._tokens = deque((token, position) for position, token in enumerate(tokens[1:], 1))

    def pop(self):
        """
        Remove and return the next (token, position) pair.

        Raises
        - IndexError: when the stream is exhausted.
        """
        try:
            return self._tokens.popleft()
        except IndexError:
            raise IndexError("pop from an exhausted token stream") from None

    def peek(self):
        """
        Return the next (token, position) pair without consuming it, or None.
        """
        return self._tokens[0] if self._tokens else None

    def push(self, token, position, /):
        """
        Re-inject a token at the front of the stream.
        """
        self._tokens.appendleft((token, position))

    def __bool__(self):
        return bool(self._tokens)

    def __len__(self):
        return len(self._tokens)

    def __repr__(self):
        return f"{type(self).__name__}({[token for token, _ in self._tokens]!r})"


__all__ = (
    "split",
    "TokenStream",
)
