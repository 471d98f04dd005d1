"""Tests for red/blue merging (ostia/merge.py)."""
from collections import deque

import pytest

from ostia.base import InvariantViolation
from ostia.fragment import NIL
from ostia.merge import ostia, fold, merge, add_blue_states
from ostia.ptt import build_ptt
from ostia.state import State, Edge, Blue
from ostia.transducer import run


A, B = 0, 1


def strings(alphabet_size, max_length):
    xss = [()]
    frontier = [()]
    for _ in range(max_length):
        frontier = [xs + (x,) for xs in frontier for x in range(alphabet_size)]
        xss.extend(frontier)
    return xss


def snapshot(root, max_length=4):
    "Observable behavior plus the identity of every live transition table."
    behavior = {xs: run(root, xs) for xs in strings(len(root.transitions), max_length)}
    tables = []
    worklist = [root]
    visited = set()
    while worklist:
        q = worklist.pop()
        if q in visited:
            continue
        visited.add(q)
        tables.append((q, id(q.transitions), q.out,
                       [None if e is None else (id(e), e.out, e.target) for e in q.transitions]))
        for _, e in q.edges():
            worklist.append(e.target)
    return behavior, tables


def parity_ptt():
    # a^n ↦ a^n followed by the parity of n
    pairs = [((A,) * n, ('a',) * n + ('01'[n % 2],)) for n in range(4)]
    return build_ptt(pairs, 1), pairs


# ── fold ──────────────────────────────────────────────────────────────────────

def test_fold_success_is_speculative():
    root = build_ptt([((), ()), ((A,), ('a',)), ((B,), ('b',))], 2)
    s = root.transitions[A].target
    before = snapshot(root)

    result = fold(root, root, A, {root})
    assert result is not None
    merged, reached = result
    assert root in merged and s in merged
    assert reached == []
    # nothing is committed yet
    assert snapshot(root) == before
    assert root.transitions[A].target is s
    # the replacement of the blue parent points back to the red state
    assert merged[root].transitions[A].target is root


def test_fold_failure_on_final_output():
    root, pairs = parity_ptt()
    before = snapshot(root, 6)
    assert fold(root, root, A, {root}) is None
    assert snapshot(root, 6) == before


def test_fold_failure_on_edge_output():
    # after `a`, red emits x on `b`; the blue state emits y on `b`
    root = build_ptt([((B,), ('x',)), ((A, B), ('y',)), ((A,), ()), ((), ())], 2)
    before = snapshot(root)
    assert fold(root, root, A, {root}) is None
    assert snapshot(root) == before


def test_fold_failure_deep():
    # the conflict only shows up one level below the blue state
    root = build_ptt([((), ('0',)), ((A,), ('0',)), ((A, A), ('1',))], 1)
    before = snapshot(root, 5)
    assert fold(root, root, A, {root}) is None
    assert snapshot(root, 5) == before


def test_fold_pushback():
    root, pairs = parity_ptt()
    s1 = root.transitions[A].target
    s2 = s1.transitions[A].target
    s3 = s2.transitions[A].target
    merged, reached = fold(root, s1, A, {root, s1})
    # s3 received the leftover `1` of the blue edge's output
    assert tuple(merged[s3].out) == ('1',)
    assert tuple(merged[s2].transitions[A].out) == ('a',)
    # live states are untouched
    assert tuple(s3.out) == ()
    assert tuple(s2.transitions[A].out) == ('a', '1')


def test_fold_adopts_edges():
    # the blue state has a `b` edge that the (non-accepting) root lacks
    root = build_ptt([((A,), ('1',)), ((A, B), ('1', '0'))], 2)
    merged, reached = fold(root, root, A, {root})
    assert tuple(merged[root].out) == ()
    assert tuple(merged[root].transitions[B].out) == ('0',)
    assert len(reached) == 1
    assert reached[0].parent is root and reached[0].symbol == B
    # adopted edges below non-red states are not reported
    merged, reached = fold(root, root, A, set())
    assert reached == []


def test_fold_twice_is_a_bug():
    # a blue subtree that is not a tree (the blue state reaches itself)
    root = State(1)
    root.out = NIL
    blue = State(1)
    blue.out = NIL
    root.transitions[A] = Edge(NIL, blue)
    blue.transitions[A] = Edge(NIL, blue)
    other = State(1)
    other.out = NIL
    other.transitions[A] = Edge(NIL, other)
    with pytest.raises(InvariantViolation):
        fold(other, root, A)


# ── merge ─────────────────────────────────────────────────────────────────────

def test_merge_commits():
    root = build_ptt([((), ()), ((A,), ('a',)), ((B,), ('b',))], 2)
    frontier = deque()
    assert merge(Blue(root, A), root, frontier, {root})
    assert root.transitions[A].target is root
    assert run(root, (A, A, A)) == ('a', 'a', 'a')
    assert run(root, (B,)) == ('b',)
    assert not frontier


def test_merge_failure_is_side_effect_free():
    root, pairs = parity_ptt()
    before = snapshot(root, 6)
    frontier = deque()
    assert not merge(Blue(root, A), root, frontier, {root})
    assert not frontier
    assert snapshot(root, 6) == before
    for xs, ys in pairs:
        assert run(root, xs) == ys


def test_merge_extends_frontier():
    root = build_ptt([((A,), ('1',)), ((A, B), ('1', '0'))], 2)
    frontier = deque()
    assert merge(Blue(root, A), root, frontier, {root})
    assert len(frontier) == 1
    (b,) = frontier
    assert b.parent is root and b.symbol == B
    assert tuple(b.state.out) == ()


def test_add_blue_states():
    root = build_ptt([((B,), ()), ((A,), ())], 2)
    blue = deque()
    add_blue_states(root, blue)
    assert [b.symbol for b in blue] == [A, B]


# ── ostia ─────────────────────────────────────────────────────────────────────

def test_ostia_scenario():
    root = build_ptt([((A,), ('1',)), ((A, B), ('1', '0'))], 2)
    assert ostia(root) is root
    assert run(root, (A,)) == ('1',)
    assert run(root, (A, B)) == ('1', '0')


def test_ostia_parity():
    root, pairs = parity_ptt()
    ostia(root)
    s = root.transitions[A].target
    assert s is not root
    assert s.transitions[A].target is root
    for n in range(10):
        assert run(root, (A,) * n) == ('a',) * n + ('01'[n % 2],)


def test_ostia_identity():
    root = build_ptt([((), ()), ((A,), ('a',)), ((B,), ('b',))], 2)
    ostia(root)
    assert root.transitions[A].target is root
    assert root.transitions[B].target is root
    assert run(root, (A, B, B, A)) == tuple('abba')


def test_ostia_verbose(capsys):
    root, _ = parity_ptt()
    ostia(root, verbose=True)
    out = capsys.readouterr().out
    assert 'promote' in out
    assert 'merge' in out
    assert 'done: 2 states' in out


def test_ostia_long_input():
    # deep blue subtrees are folded without recursion
    n = 5000
    pairs = [((A,) * n, ('a',) * n), ((), ())]
    root = build_ptt(pairs, 1)
    ostia(root)
    s = root.transitions[A].target
    assert s.transitions[A].target is s
    assert run(root, (A,) * n) == ('a',) * n
    assert run(root, ()) == ()
