#!/usr/bin/env python3
"""End-to-end example: learning a transducer from examples.

  1. Write down a few input/output pairs of a string rewrite
  2. Learn an onward subsequential transducer from them (OSTIA)
  3. Apply it to inputs that were never seen

The rewrite replaces `a` by `x` when the next symbol is `b` and by `y`
otherwise; the learned machine has to delay its output by one symbol.

Usage:
    python examples/hello_world.py
"""

from ostia import learn, examples


def main():

    # --- Step 1: an informant ---
    target = examples.lookahead()
    sample = target.sample(5)
    print(f'{len(sample)} examples, e.g. {sample[10]}')

    # --- Step 2: learn ---
    t = learn(sample, alphabet=target.alphabet, verbose=True)
    print(t)

    # --- Step 3: generalize ---
    for xs in ['abab', 'aaab', 'bbbbbbbbaaaaaaab', 'abababababab']:
        ys = t(xs)
        print(f'{xs!r} ↦ {"".join(ys) if ys is not None else None!r}'
              f'   (want {"".join(target(xs))!r})')


if __name__ == '__main__':
    main()
