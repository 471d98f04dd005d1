"""
Learning curves for OSTIA on the example targets.

For each target we draw random informants of growing size, learn a
transducer, and measure its size, the time it took, and how often it agrees
with the target on held-out inputs.

Usage:
    python benchmark/run.py
"""
import time

import numpy as np
import pandas as pd
import tqdm

from ostia import learn, examples


def random_inputs(rng, alphabet, n, max_length):
    for _ in range(n):
        length = rng.randint(0, max_length + 1)
        yield tuple(alphabet[i] for i in rng.randint(0, len(alphabet), size=length))


def accuracy(transducer, target, inputs):
    hits = total = 0
    for xs in inputs:
        want = target(xs)
        if want is None:
            continue
        total += 1
        hits += (transducer(xs) == want)
    return hits / total if total else float('nan')


def main(sizes=(10, 30, 100, 300, 1000), max_length=8, seed=0):
    rng = np.random.RandomState(seed)
    rows = []
    for target in examples.all_targets():
        heldout = list(random_inputs(rng, target.alphabet, 500, 2 * max_length))
        for n in tqdm.tqdm(sizes, desc=target.name):
            sample = {}
            for xs in random_inputs(rng, target.alphabet, n, max_length):
                ys = target(xs)
                if ys is not None:
                    sample[xs] = ys
            t0 = time.perf_counter()
            t = learn(sample.items(), alphabet=target.alphabet)
            took = time.perf_counter() - t0
            rows.append(dict(
                target=target.name,
                sample=len(sample),
                states=len(t),
                seconds=took,
                accuracy=accuracy(t, target, heldout),
            ))

    df = pd.DataFrame(rows)
    print(df.to_string(index=False))
    return df


if __name__ == "__main__":
    main()
