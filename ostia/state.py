from ostia.fragment import NIL, copy_then_concat


class Edge:
    "A transition: the output emitted when taking it and the state it leads to."

    __slots__ = ('out', 'target')

    def __init__(self, out, target):
        self.out = out
        self.target = target

    def copy(self):
        # fragments are immutable, so only the edge record itself is fresh
        return Edge(self.out, self.target)

    def __repr__(self):
        return f'Edge({self.out!r}, {id(self.target):#x})'


class State:
    """
    A state of a subsequential transducer: one optional `Edge` per input
    symbol, and a final output (`None` for a non-accepting state, a possibly
    empty fragment otherwise).

    States are compared and hashed by identity, which is what the speculative
    mappings used during merging rely on.
    """

    __slots__ = ('transitions', 'out')

    def __init__(self, alphabet_size):
        self.transitions = [None] * alphabet_size
        self.out = None

    @classmethod
    def copy(cls, other):
        "Copy of `other` whose edges can be rewritten without touching `other`."
        s = cls.__new__(cls)
        s.transitions = [None if e is None else e.copy() for e in other.transitions]
        s.out = other.out
        return s

    def become(self, other):
        "Take over the transition table and final output of `other`."
        self.transitions = other.transitions
        self.out = other.out

    def prepend(self, prefix):
        """
        Push `prefix` down one level: it is put in front of the output of every
        outgoing edge and of the final output.  Non-accepting states stay
        non-accepting.
        """
        if prefix is NIL:
            return
        for e in self.transitions:
            if e is not None:
                e.out = copy_then_concat(prefix, e.out)
        if self.out is not None:
            self.out = copy_then_concat(prefix, self.out)

    def edges(self):
        for x, e in enumerate(self.transitions):
            if e is not None:
                yield x, e

    def __repr__(self):
        return f'<{__class__.__name__} {id(self):#x}>'


class Blue:
    """
    A frontier state, addressed through its parent and incoming symbol rather
    than directly, since the state the parent points to may be swapped out by
    a committed merge.
    """

    __slots__ = ('parent', 'symbol')

    def __init__(self, parent, symbol):
        self.parent = parent
        self.symbol = symbol

    @property
    def state(self):
        return self.parent.transitions[self.symbol].target

    def __repr__(self):
        return f'Blue({self.parent!r}, {self.symbol!r})'
