"""
Output fragments: pending pieces of output attached to edges and to final
states of a subsequential transducer.

A fragment is a singly linked chain of immutable cells terminated by `NIL`.
Cells are never mutated after construction, so the only way a chain can be
"changed" is by building new cells in front of an existing (shared) tail.  In
particular, no operation can ever close a cycle; `has_cycle` is kept as a
debugging aid and checked in `assert`s.
"""


class Fragment:
    __slots__ = ('head', 'tail')

    def __init__(self, head, tail):
        self.head = head
        self.tail = tail

    def __iter__(self):
        q = self
        while q is not NIL:
            yield q.head
            q = q.tail

    def __len__(self):
        n = 0
        q = self
        while q is not NIL:
            n += 1
            q = q.tail
        return n

    def __bool__(self):
        return self is not NIL

    def __eq__(self, other):
        if not isinstance(other, Fragment):
            return NotImplemented
        return equal(self, other)

    def __hash__(self):
        return hash(tuple(self))

    def __str__(self):
        return ' '.join(str(y) for y in self)

    def __repr__(self):
        return f'{__class__.__name__}({tuple(self)!r})'


# The empty fragment.  Its `tail` is never followed.
NIL = Fragment(None, None)


def from_seq(ys):
    "Build a fragment holding the symbols of the sequence `ys`."
    q = NIL
    for y in reversed(tuple(ys)):
        q = Fragment(y, q)
    assert not has_cycle(q)
    return q


def has_cycle(q):
    visited = set()
    while q is not NIL:
        if id(q) in visited:
            return True
        visited.add(id(q))
        q = q.tail
    return False


def equal(a, b):
    while a is not NIL and b is not NIL:
        if a.head != b.head:
            return False
        a = a.tail
        b = b.tail
    return a is NIL and b is NIL


def copy_then_concat(q, tail):
    """
    Fresh cells holding the symbols of `q`, followed by `tail`.  The cells of
    `q` are left untouched (and may continue to be shared by other owners).
    """
    assert not has_cycle(q) and not has_cycle(tail)
    if q is NIL:
        return tail
    if tail is NIL:
        return q
    symbols = []
    while q is not NIL:
        symbols.append(q.head)
        q = q.tail
    for y in reversed(symbols):
        tail = Fragment(y, tail)
    assert not has_cycle(tail)
    return tail


def concat(q, tail):
    """
    `q` followed by `tail`.  The caller gives up `q`; since cells are
    immutable, this is the same construction as `copy_then_concat`.
    """
    return copy_then_concat(q, tail)


def common_prefix_split(x, y):
    """
    Walk `x` and `y` in lock step while their symbols agree.  Returns
    `(prefix, rest_x, rest_y)` such that `x = prefix · rest_x`,
    `y = prefix · rest_y` and the first symbols of `rest_x` and `rest_y`
    differ (or one of them is empty).
    """
    x0, y0 = x, y
    symbols = []
    while x is not NIL and y is not NIL and x.head == y.head:
        symbols.append(x.head)
        x = x.tail
        y = y.tail
    # a chain that was matched completely is its own prefix
    if x is NIL:
        return x0, x, y
    if y is NIL:
        return y0, x, y
    return from_seq(symbols), x, y
