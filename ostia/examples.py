"""
Small subsequential functions used to produce informants for tests, the
benchmark and the demo.  Inputs and outputs are tuples of one-character
strings.
"""
from itertools import product


class Target:

    def __init__(self, name, alphabet, f):
        self.name = name
        self.alphabet = tuple(alphabet)
        self.f = f

    def __call__(self, xs):
        return self.f(tuple(xs))

    def __repr__(self):
        return f'{__class__.__name__}({self.name!r})'

    def strings(self, max_length):
        "All input strings up to length `max_length`, shortest first."
        for n in range(max_length + 1):
            yield from product(self.alphabet, repeat=n)

    def sample(self, max_length):
        "The informant made of every input up to length `max_length` that is in the domain."
        pairs = []
        for xs in self.strings(max_length):
            ys = self(xs)
            if ys is not None:
                pairs.append((xs, ys))
        return pairs


def identity(alphabet=('a', 'b')):
    return Target('identity', alphabet, lambda xs: xs)


def delete_b():
    return Target('delete_b', 'ab', lambda xs: tuple(x for x in xs if x != 'b'))


def replace(mapping):
    "Letter-to-string homomorphism, e.g., `replace({'a': 'xy', 'b': ''})`."
    return Target('replace', mapping, lambda xs: tuple(y for x in xs for y in mapping[x]))


def parity(alphabet=('a',)):
    "Copy the input, then write 0 or 1 for an even or odd number of a's."
    def f(xs):
        return xs + ('01'[xs.count('a') % 2],)
    return Target('parity', alphabet, f)


def count_mod3():
    "Only the final output carries information: the number of a's mod 3."
    return Target('count_mod3', 'ab', lambda xs: (str(xs.count('a') % 3),))


def lookahead():
    """
    Rewrite `a` as `x` when the next symbol is `b` and as `y` otherwise.  The
    output for an `a` can only be produced after the next symbol is read.
    """
    def f(xs):
        ys = []
        for i, x in enumerate(xs):
            if x == 'a':
                ys.append('x' if xs[i+1:i+2] == ('b',) else 'y')
            else:
                ys.append(x)
        return tuple(ys)
    return Target('lookahead', 'ab', f)


def even_length():
    "Partial function: defined only on inputs of even length, which it reverses pairwise."
    def f(xs):
        if len(xs) % 2:
            return None
        ys = []
        for i in range(0, len(xs), 2):
            ys.extend((xs[i+1], xs[i]))
        return tuple(ys)
    return Target('even_length', 'ab', f)


def all_targets():
    return [
        identity(),
        delete_b(),
        replace({'a': 'xy', 'b': ''}),
        parity(('a', 'b')),
        count_mod3(),
        lookahead(),
        even_length(),
    ]
