"""
Red/blue state merging for onward subsequential transducers (OSTIA).

Red states are part of the final machine; blue states hang off red states and
are candidates for being folded into a red state.  A fold is tried on
speculative copies of every state it touches, and the copies replace the
originals only when the whole fold succeeds.
"""
from collections import deque

from arsenal import colors

from ostia.base import InvariantViolation
from ostia.fragment import NIL, equal, common_prefix_split
from ostia.state import State, Blue


def ostia(root, verbose=False):
    """
    Merge the states of the onward tree rooted at `root` in place.  Returns
    `root` for convenience.
    """
    red = [root]
    red_states = {root}
    blue = deque()
    add_blue_states(root, blue)
    t = 0
    while blue:
        t += 1
        b = blue.popleft()
        q = b.state
        # Earliest red states are tried first; the result depends on this order.
        for k, r in enumerate(red):
            if merge(b, r, blue, red_states):
                if verbose:
                    print(f'[{t}]', colors.light.green % 'merge', f'blue {b.symbol} into red {k}')
                break
        else:
            red.append(q)
            red_states.add(q)
            add_blue_states(q, blue)
            if verbose:
                print(f'[{t}]', colors.light.yellow % 'promote', f'blue {b.symbol} to red {len(red) - 1}')
    if verbose:
        print(colors.cyan % f'done: {len(red)} states after {t} steps')
    return root


def add_blue_states(parent, blue):
    for x, _ in parent.edges():
        blue.append(Blue(parent, x))


def merge(blue, red, frontier, red_states):
    """
    Try to fold `blue` into `red`.  On success, commit the fold and add the
    blue states it uncovered below red states to `frontier`.  On failure the
    automaton is left exactly as it was.
    """
    result = fold(red, blue.parent, blue.symbol, red_states)
    if result is None:
        return False
    merged, reached = result
    for q, replacement in merged.items():
        q.become(replacement)
    frontier.extend(reached)
    return True


def fold(red, blue_parent, blue_symbol, red_states=()):
    """
    Speculatively fold the state `blue_parent.transitions[blue_symbol].target`
    (and everything below it) into `red`.

    Returns `(merged, reached)` where `merged` maps each touched state to its
    replacement and `reached` lists the new blue states (edges adopted by a
    state in `red_states`), or `None` if the two states cannot be unified.
    Nothing reachable from the automaton is modified either way.
    """
    merged = {}
    reached = []
    _copy(merged, red)
    _copy(merged, blue_parent).transitions[blue_symbol].target = red

    # Depth-first, same visiting order as the obvious recursive formulation;
    # a frame yields the arguments of each sub-fold it needs and returns
    # whether its own state could be unified.
    stack = [_fold(red, NIL, blue_parent, blue_symbol, merged, reached, red_states)]
    while stack:
        try:
            args = next(stack[-1])
        except StopIteration as stop:
            stack.pop()
            if not stop.value:
                return None
            continue
        stack.append(_fold(*args, merged, reached, red_states))

    return merged, reached


def _copy(merged, q):
    "Get-or-copy the speculative replacement of `q`."
    c = merged.get(q)
    if c is None:
        c = merged[q] = State.copy(q)
    return c


def _fold(red, pushback, blue_parent, blue_symbol, merged, reached, red_states):
    merged_red = _copy(merged, red)
    blue = blue_parent.transitions[blue_symbol].target
    if blue in merged:
        raise InvariantViolation(f'{blue!r} was folded twice in the same merge')
    merged_blue = merged[blue] = State.copy(blue)
    merged_blue.prepend(pushback)

    if merged_blue.out is not None:
        if merged_red.out is None:
            merged_red.out = merged_blue.out
        elif not equal(merged_red.out, merged_blue.out):
            return False

    for x, blue_edge in enumerate(merged_blue.transitions):
        if blue_edge is None:
            continue
        red_edge = merged_red.transitions[x]
        if red_edge is None:
            merged_red.transitions[x] = blue_edge.copy()
            if red in red_states:
                reached.append(Blue(red, x))
        else:
            prefix, rest_red, rest_blue = common_prefix_split(red_edge.out, blue_edge.out)
            if rest_red is not NIL:
                # red's output is not a prefix of blue's
                return False
            blue_edge.out = prefix
            yield red_edge.target, rest_blue, merged_blue, x

    return True
