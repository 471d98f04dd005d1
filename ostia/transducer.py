import html
from collections import deque
from numbers import Integral

from arsenal import Integerizer
from graphviz import Digraph

from ostia.base import AlphabetRangeError
from ostia.merge import ostia
from ostia.ptt import build_ptt


def run(root, xs):
    """
    Transduce the input symbols `xs` starting at `root`.  Returns the output as
    a tuple, or `None` if the transducer is undefined on `xs`.
    """
    n = len(root.transitions)
    ys = []
    state = root
    for x in xs:
        if not isinstance(x, Integral) or not (0 <= x < n):
            return None
        edge = state.transitions[x]
        if edge is None:
            return None
        ys.extend(edge.out)
        state = edge.target
    if state.out is None:
        return None
    ys.extend(state.out)
    return tuple(ys)


class SubsequentialTransducer:
    """
    A learned (or hand-built) deterministic transducer.  The automaton is
    reached only through `root`; `alphabet`, if given, lists the input
    symbols, which are then translated to their positions before walking the
    transition tables.
    """

    def __init__(self, root, alphabet=None):
        self.root = root
        self.alphabet = None if alphabet is None else tuple(alphabet)
        self._encode = None if alphabet is None else {a: i for i, a in enumerate(self.alphabet)}
        if self._encode is not None and not len(self._encode) == len(self.alphabet) == len(root.transitions):
            raise ValueError(f'alphabet must have one distinct entry per input symbol, '
                             f'got {len(self.alphabet)} for {len(root.transitions)} symbols')

    @property
    def alphabet_size(self):
        return len(self.root.transitions)

    def encode(self, xs):
        "Input symbols → transition indices; unknown symbols become `None`."
        if self._encode is None:
            return tuple(xs)
        return tuple(self._encode.get(x) for x in xs)

    def decode(self, x):
        return x if self.alphabet is None else self.alphabet[x]

    def apply(self, xs):
        return run(self.root, self.encode(xs))

    __call__ = apply

    #___________________________________________________________________________
    # Inspection

    def states(self):
        "Reachable states in breadth-first order."
        visited = {self.root}
        order = [self.root]
        worklist = deque([self.root])
        while worklist:
            q = worklist.popleft()
            for _, e in q.edges():
                if e.target not in visited:
                    visited.add(e.target)
                    order.append(e.target)
                    worklist.append(e.target)
        return order

    def arcs(self, q):
        for x, e in q.edges():
            yield self.decode(x), tuple(e.out), e.target

    def is_final(self, q):
        return q.out is not None

    def final_output(self, q):
        return None if q.out is None else tuple(q.out)

    def __len__(self):
        return len(self.states())

    def relation(self, max_length):
        "Enumerate the input-output pairs of the transducer with inputs up to length `max_length`."
        worklist = deque([(self.root, (), ())])
        while worklist:
            (q, xs, ys) = worklist.popleft()
            if q.out is not None:
                yield xs, ys + tuple(q.out)
            if len(xs) >= max_length:
                continue
            for x, out, j in self.arcs(q):
                worklist.append((j, xs + (x,), ys + out))

    def __repr__(self):
        return f'{__class__.__name__}({len(self)} states)'

    def __str__(self):
        f = Integerizer()
        output = ['{']
        for q in self.states():
            final = '' if q.out is None else f' / {str(q.out) or "ε"}'
            output.append(f'  {f(q)}{final}')
            for x, out, j in self.arcs(q):
                output.append(f'    {x}:{" ".join(map(str, out)) or "ε"} -> {f(j)}')
        output.append('}')
        return '\n'.join(output)

    def _repr_mimebundle_(self, *args, **kwargs):
        return self.graphviz()._repr_mimebundle_(*args, **kwargs)

    def graphviz(
        self,
        fmt_node=lambda i, ys: str(i) if ys is None else f'{i}/{" ".join(map(str, ys)) or "ε"}',
        fmt_edge=lambda x, ys: f'{x}:{" ".join(map(str, ys)) or "ε"}',
        sty_node=lambda q: {},
    ):
        """
        Render with graphviz.  `fmt_node` gets a state's number and its final
        output (`None` if not accepting), `fmt_edge` an input symbol and the
        output of its arc, `sty_node` the state itself.
        """
        g = Digraph(
            graph_attr=dict(rankdir='LR'),
            node_attr=dict(
                fontname='Monospace',
                fontsize='8',
                height='.05', width='.05',
                margin="0.055,0.042",
                shape='box',
                style='rounded',
            ),
            edge_attr=dict(
                arrowsize='0.3',
                fontname='Monospace',
                fontsize='8'
            ),
        )

        f = Integerizer()
        states = self.states()

        g.node('<start>', label='', shape='point', height='0', width='0')
        g.edge('<start>', str(f(self.root)), label='')

        for q in states:
            sty = dict(peripheries='2' if self.is_final(q) else '1')
            sty.update(sty_node(q))
            g.node(str(f(q)), label=html.escape(fmt_node(f(q), self.final_output(q))), **sty)

        for q in states:
            for x, out, j in self.arcs(q):
                g.edge(str(f(q)), str(f(j)), label=html.escape(fmt_edge(x, out)))

        return g


class OSTIA:
    """
    Onward subsequential transducer inference.

    Calling the learner on an informant (an iterable of `(input, output)`
    pairs) builds the onward prefix-tree transducer of the informant and
    merges its states.  Input symbols are either integers in
    `[0, alphabet_size)` or, when `alphabet` is given, elements of `alphabet`.
    """

    def __init__(self, alphabet_size=None, alphabet=None, verbose=False):
        if (alphabet_size is None) == (alphabet is None):
            raise ValueError('specify exactly one of `alphabet_size` and `alphabet`')
        if alphabet is not None:
            alphabet = tuple(alphabet)
            alphabet_size = len(alphabet)
            if len(set(alphabet)) != alphabet_size:
                raise ValueError(f'alphabet has repeated symbols: {alphabet!r}')
        self.alphabet = alphabet
        self.alphabet_size = alphabet_size
        self.verbose = verbose
        self._index = None if alphabet is None else {a: i for i, a in enumerate(alphabet)}

    def encode(self, xs):
        if self._index is None:
            return xs
        xs = tuple(xs)
        for x in xs:
            if x not in self._index:
                raise AlphabetRangeError(xs, x, self.alphabet_size)
        return tuple(self._index[x] for x in xs)

    def ptt(self, samples):
        return build_ptt(((self.encode(xs), ys) for xs, ys in samples), self.alphabet_size)

    def __call__(self, samples):
        root = self.ptt(samples)
        ostia(root, verbose=self.verbose)
        return SubsequentialTransducer(root, self.alphabet)


def learn(samples, alphabet_size=None, *, alphabet=None, verbose=False):
    "Learn a subsequential transducer consistent with `samples`."
    return OSTIA(alphabet_size, alphabet=alphabet, verbose=verbose)(samples)
