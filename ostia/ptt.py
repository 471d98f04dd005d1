"""
Onward prefix-tree transducer (PTT).

Each sample pair is threaded through the tree from the root, carrying the part
of its output that has not been emitted yet.  Whenever the walk follows an
existing edge, the edge keeps only the longest common prefix of its output and
the carry; the edge's leftover is pushed one level down.  Output is therefore
always placed as early as possible (onward form).
"""
from numbers import Integral

from ostia.base import SampleConflict, AlphabetRangeError
from ostia.fragment import NIL, from_seq, equal, common_prefix_split
from ostia.state import State, Edge


def build_ptt(samples, alphabet_size):
    "Build the onward prefix-tree transducer of the informant `samples`."
    if not isinstance(alphabet_size, int) or alphabet_size <= 0:
        raise ValueError(f'alphabet_size must be a positive integer, got {alphabet_size!r}')
    root = State(alphabet_size)
    for xs, ys in samples:
        insert(root, xs, ys)
    return root


def insert(root, xs, ys):
    """
    Insert the pair `xs ↦ ys` into the onward tree rooted at `root`.  The
    input is validated before anything is modified.
    """
    xs = tuple(xs)
    ys = tuple(ys)
    n = len(root.transitions)
    for x in xs:
        if not isinstance(x, Integral) or not (0 <= x < n):
            raise AlphabetRangeError(xs, x, n)

    carry = from_seq(ys)
    state = root
    for x in xs:
        edge = state.transitions[x]
        if edge is None:
            edge = state.transitions[x] = Edge(carry, State(n))
            carry = NIL
        else:
            #   edge.out = lcp(edge.out, carry)
            #   carry    = lcp⁻¹ carry
            #   pushback = lcp⁻¹ edge.out   (goes to the target's outputs)
            prefix, pushback, carry = common_prefix_split(edge.out, carry)
            edge.out = prefix
            edge.target.prepend(pushback)
        state = edge.target

    if state.out is not None and not equal(state.out, carry):
        # `state.out` is what is left of the recorded output after the edges
        # on the path; put the full recorded output back together.
        have = _path_output(root, xs) + tuple(state.out)
        raise SampleConflict(xs, have, ys)
    state.out = carry


def _path_output(root, xs):
    ys = []
    state = root
    for x in xs:
        edge = state.transitions[x]
        ys.extend(edge.out)
        state = edge.target
    return tuple(ys)


def is_onward(root):
    """
    [True/False] The tree rooted at `root` is onward: for every state other
    than the root, the outputs of all completions starting at that state have
    no common prefix.

    Only meaningful for tree-shaped automata (e.g., before merging); raises
    `ValueError` if some state is reachable along two paths.
    """
    # lcp of all completions for each state, computed bottom-up
    lcp = {}
    order = []
    visited = set()
    stack = [root]
    while stack:
        q = stack.pop()
        if q in visited:
            raise ValueError('is_onward expects a tree-shaped automaton')
        visited.add(q)
        order.append(q)
        for _, e in q.edges():
            stack.append(e.target)

    for q in reversed(order):
        outs = []
        if q.out is not None:
            outs.append(tuple(q.out))
        for _, e in q.edges():
            outs.append(tuple(e.out) + lcp[e.target])
        lcp[q] = _lcp(outs)
        if q is not root and lcp[q]:
            return False
    return True


def _lcp(strings):
    if not strings:
        return ()
    first = strings[0]
    n = len(first)
    for s in strings[1:]:
        n = min(n, len(s))
        for i in range(n):
            if s[i] != first[i]:
                n = i
                break
    return first[:n]
