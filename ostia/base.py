class SampleConflict(ValueError):
    """
    The informant maps one input sequence to two different outputs.  The
    learner assumes the target is a function, so there is nothing sensible to
    build.
    """

    def __init__(self, xs, have, want):
        self.input = tuple(xs)
        self.have = tuple(have)
        self.want = tuple(want)
        super().__init__(
            f'Conflicting outputs for input {self.input}: {self.have} and {self.want}'
        )


class AlphabetRangeError(ValueError):
    "An input symbol of the sample lies outside the learner's alphabet."

    def __init__(self, xs, symbol, alphabet_size):
        self.input = tuple(xs)
        self.symbol = symbol
        self.alphabet_size = alphabet_size
        super().__init__(
            f'Input symbol {symbol!r} of {self.input} is outside the alphabet [0, {alphabet_size})'
        )


class InvariantViolation(AssertionError):
    "Raised when the merge machinery detects a bug in itself (never a data problem)."
