"""
Benchmark: emerge vs copy-and-mutate updates.

The usual way to update a nested structure without mutating it is
copy.deepcopy followed by an in-place assignment.  This benchmark times
emerge against that baseline on:
    1. realistic config documents
    2. wide and deep generated trees
    3. no-op updates, where emerge returns the input itself

The point is NOT only "we're faster" — the point is:
    emerge SHARES everything that did not change, and the baseline
    shares nothing, so consumers can skip work with an `is` check.
"""

import copy
import sys
import os
import time

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from emerge import equal, get_in, merge, patch, put, put_in


# ═══════════════════════════════════════════════════════════════════
#  TEST DATA
# ═══════════════════════════════════════════════════════════════════

CONFIG = {
    "server": {
        "host": "0.0.0.0",
        "port": 443,
        "tls": True,
        "workers": 4,
    },
    "database": {
        "host": "db.internal",
        "port": 5432,
        "name": "production",
        "pool_size": 10,
        "ssl": True,
    },
    "logging": {
        "level": "WARN",
        "format": "json",
        "outputs": ["stdout", "file"],
    },
    "cache": {
        "backend": "redis",
        "ttl": 300,
        "max_size": 10000,
    },
}

CONFIG_OVERRIDES = {
    "server": {"port": 8080, "workers": 8},
    "database": {"host": "db.staging", "name": "staging"},
    "logging": {"level": "DEBUG"},
    "monitoring": {"enabled": True, "endpoint": "/health"},
}

ROUNDS = 200


def _try_import(name):
    """Safely attempt to import an optional dependency by name."""
    import importlib
    try:
        return importlib.import_module(name)
    except ImportError:
        return None


def make_wide(n):
    """A dict of n records, each a small dict with a list inside."""
    return {
        f"key_{i}": {"id": i, "name": f"item {i}", "tags": ["a", "b", i]}
        for i in range(n)
    }


def make_deep(depth):
    """A chain of `depth` nested dicts, each with a sibling payload."""
    tree = {"leaf": True}
    for i in range(depth):
        tree = {"child": tree, "level": i, "payload": list(range(10))}
    return tree


def deep_path(depth):
    return ["child"] * depth + ["leaf"]


def naive_put_in(tree, path, value):
    out = copy.deepcopy(tree)
    target = out
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    return out


def naive_merge(prev, next):
    out = copy.deepcopy(prev)

    def walk(target, source):
        for key, value in source.items():
            if isinstance(value, dict) and isinstance(target.get(key), dict):
                walk(target[key], value)
            else:
                target[key] = copy.deepcopy(value)

    walk(out, next)
    return out


def timed(fun, *args):
    """Best-effort mean time of fun(*args) over ROUNDS calls, in ms."""
    t0 = time.perf_counter()
    for _ in range(ROUNDS):
        result = fun(*args)
    return result, (time.perf_counter() - t0) / ROUNDS * 1000


def shared(out, src):
    """Fraction of src's top-level values that out reuses by reference."""
    if not src:
        return 1.0
    same = sum(1 for key in src if key in out and out[key] is src[key])
    return same / len(src)


# ═══════════════════════════════════════════════════════════════════
#  BENCHMARKS
# ═══════════════════════════════════════════════════════════════════

def benchmark_config_update():
    """Update one field of a realistic config."""
    print("=" * 70)
    print("  §1  CONFIG UPDATE (realistic use case)")
    print("=" * 70)
    print()

    path = ["database", "pool_size"]

    out, dt_emerge = timed(put_in, CONFIG, path, 20)
    naive, dt_naive = timed(naive_put_in, CONFIG, path, 20)

    match = "✓" if equal(out, naive) else "✗"
    print(f"  {match} put_in(config, {path}, 20)")
    print(f"    emerge:        {dt_emerge:.4f}ms  shared {shared(out, CONFIG):.0%}")
    print(f"    deepcopy+set:  {dt_naive:.4f}ms  shared {shared(naive, CONFIG):.0%}")
    print()

    out, dt_emerge = timed(merge, CONFIG, CONFIG_OVERRIDES)
    naive, dt_naive = timed(naive_merge, CONFIG, CONFIG_OVERRIDES)

    match = "✓" if equal(out, naive) else "✗"
    print(f"  {match} merge(config, overrides)")
    print(f"    emerge:        {dt_emerge:.4f}ms  shared {shared(out, CONFIG):.0%}")
    print(f"    deepcopy+walk: {dt_naive:.4f}ms  shared {shared(naive, CONFIG):.0%}")
    print()


def benchmark_noop_update():
    """Updates that change nothing must hand back the input."""
    print("=" * 70)
    print("  §2  NO-OP UPDATES (reference preservation)")
    print("=" * 70)
    print()

    cases = [
        ("put(config, 'server', copy)", put, CONFIG, "server", copy.deepcopy(CONFIG["server"])),
        ("put_in(config, path, same)", put_in, CONFIG, ["logging", "level"], "WARN"),
        ("patch(config, subset)", patch, CONFIG, {"cache": copy.deepcopy(CONFIG["cache"])}),
        ("merge(config, subset)", merge, CONFIG, {"server": {"port": 443}}),
    ]

    all_pass = True
    for label, fun, *args in cases:
        out, dt = timed(fun, *args)
        ok = out is CONFIG
        all_pass = all_pass and ok
        print(f"  {'✓' if ok else '✗'} {label:<34} is input  [{dt:.4f}ms]")

    print()
    if all_pass:
        print("  RESULT: every no-op update returned the input reference.")
    else:
        print("  RESULT: MISMATCH — a no-op update allocated a new tree!")
    print()


def benchmark_equality():
    """Cost of the equality check that reference preservation relies on."""
    print("=" * 70)
    print("  §3  EQUALITY")
    print("=" * 70)
    print()

    for n in [10, 100, 1000]:
        a = make_wide(n)
        b = copy.deepcopy(a)

        _, dt_equal = timed(equal, a, b)
        _, dt_builtin = timed(lambda x, y: x == y, a, b)
        print(f"  Wide({n:>4}): equal={dt_equal:>8.4f}ms  ==={dt_builtin:>8.4f}ms")

    print()


def benchmark_vs_deepdiff():
    """Cross-check results with deepdiff (if available)."""
    print("=" * 70)
    print("  §4  CROSS-CHECK WITH EXISTING TOOLS")
    print("=" * 70)
    print()

    deepdiff = _try_import("deepdiff")
    if not deepdiff:
        print("  deepdiff:         NOT INSTALLED (pip install deepdiff)")
        print()
        return

    out = merge(CONFIG, CONFIG_OVERRIDES)
    naive = naive_merge(CONFIG, CONFIG_OVERRIDES)

    t0 = time.perf_counter()
    result = deepdiff.DeepDiff(naive, out)
    dt = time.perf_counter() - t0

    print(f"  deepdiff(naive merge, emerge merge):")
    print(f"    Differences:    {len(result)}")
    print(f"    Time:           {dt*1000:.3f}ms")

    result = deepdiff.DeepDiff(CONFIG, out)
    changed = sum(len(v) if hasattr(v, "__len__") else 0 for v in result.values())
    print(f"  deepdiff(config, emerge merge):")
    print(f"    Changes found:  {changed}")
    print()

    print("  KEY INSIGHT:")
    print("    deepdiff tells you WHAT changed after the fact.")
    print("    emerge tells you WHETHER it changed with an `is` check, at any depth.")
    print()


def benchmark_scaling():
    """Test how a single deep update scales with tree size."""
    print("=" * 70)
    print("  §5  SCALING")
    print("=" * 70)
    print()

    for n in [10, 100, 1000]:
        tree = make_wide(n)
        path = [f"key_{n // 2}", "name"]

        _, dt_emerge = timed(put_in, tree, path, "renamed")
        _, dt_naive = timed(naive_put_in, tree, path, "renamed")
        print(f"  Wide  {n:>4}: emerge={dt_emerge:>8.4f}ms  deepcopy={dt_naive:>8.4f}ms")

    print()

    for depth in [5, 20, 100]:
        tree = make_deep(depth)
        path = deep_path(depth)

        out, dt_emerge = timed(put_in, tree, path, False)
        _, dt_naive = timed(naive_put_in, tree, path, False)
        ok = get_in(out, path) is False and out["payload"] is tree["payload"]
        print(f"  {'✓' if ok else '✗'} Depth {depth:>3}: "
              f"emerge={dt_emerge:>8.4f}ms  deepcopy={dt_naive:>8.4f}ms")

    print()


def main():
    print()
    print("╔══════════════════════════════════════════════════════════════════════╗")
    print("║          REFERENCE-PRESERVING UPDATES — BENCHMARK SUITE             ║")
    print("║          emerge v0.1.0                                              ║")
    print("╚══════════════════════════════════════════════════════════════════════╝")
    print()

    benchmark_config_update()
    benchmark_noop_update()
    benchmark_equality()
    benchmark_vs_deepdiff()
    benchmark_scaling()

    print("=" * 70)
    print("  SUMMARY")
    print("=" * 70)
    print()
    print("  emerge updates nested data without mutating it and:")
    print("    1. Copies only the containers along the updated path")
    print("    2. Returns the input itself when nothing changed (shown above)")
    print("    3. Reuses equal sub-trees of replacement values")
    print()


if __name__ == "__main__":
    main()
