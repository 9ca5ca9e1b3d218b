"""
Exact 0/1 knapsack solvers.

Core contract:
knapsack(items, capacity) -> List[int]

Each solver below additionally adheres to the standard solver interface:
solver(items, capacity, ...) or solver(instance={"items": ..., "capacity": ...})
-> Tuple[List[int], int, Dict]

Returns:
1.  chosen indices (List[int]): zero-based positions into `items`.
2.  total value (int): summed value of the chosen items.
3.  logs (Dict): structured run information (runtime, final_weight, params...).

Items may be objects with `weight`/`value` attributes, objects with
`weight()`/`value()` methods, or dicts such as {"id": 0, "weight": 3, "value": 4}.
Weights, values and capacity must be non-negative integers.
"""

import time
import math
import logging
import numbers
from collections.abc import Mapping
from typing import List, Any, Tuple, NamedTuple, Protocol, Sequence

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_GUARD = 2e7
DEFAULT_MAX_EXHAUSTIVE_ITEMS = 20


class Packable(Protocol):
    """Anything that can be placed in a knapsack."""

    weight: int
    value: int


class Item(NamedTuple):
    weight: int
    value: int


# --- compatibility decorator: accept instance=... or items+capacity ---
from functools import wraps

def accept_instance(func):
    """
    Decorator that allows calling solver(instance=inst, ...) where inst is a dict
    with keys 'items' and 'capacity'. Explicit items/capacity keyword arguments
    take precedence over the instance contents.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        inst = kwargs.pop('instance', None)
        if inst is not None:
            if not args and 'items' not in kwargs:
                kwargs['items'] = inst.get('items')
            if len(args) < 2 and 'capacity' not in kwargs:
                kwargs['capacity'] = inst.get('capacity')
        return func(*args, **kwargs)
    return wrapper
# ----------------------------------------------------------------------

def _base_logs(message, runtime, final_value=None, final_weight=None,
               solution_size=None, seed=None, params=None, extra=None,
               capacity=None, strict=False):
    """
    Standardized logs for solvers with sanity checks.

    Args:
      message (str): human readable status.
      runtime (float): elapsed seconds.
      final_value (int|None): objective value of the returned solution.
      final_weight (int|None): total weight of the returned solution.
      solution_size (int|None): number of items in returned solution.
      seed (int|None): recorded for interface parity; exact solvers are deterministic.
      params (dict|None): solver parameters for reproducibility.
      extra (dict|None): any extra fields.
      capacity (int|None): instance capacity; when provided we sanity-check final_weight <= capacity.
      strict (bool): if True, raise AssertionError on sanity violation. Default False.

    Returns:
      dict: structured log containing inputs above plus 'sanity_warnings' (list) and 'infeasible' (bool).
    """
    logs = {
        "message": str(message),
        "runtime": float(runtime) if runtime is not None else None,
        "final_value": None if final_value is None else int(final_value),
        "final_weight": None if final_weight is None else int(final_weight),
        "solution_size": None if solution_size is None else int(solution_size),
        "seed": seed,
        "params": params or {},
        "extra": extra or {},
        "capacity": None if capacity is None else int(capacity),
        "timestamp": time.time(),
        "sanity_warnings": [],
        "infeasible": False
    }

    if logs["final_weight"] is not None and logs["capacity"] is not None:
        if logs["final_weight"] > logs["capacity"]:
            msg = f"final_weight ({logs['final_weight']}) exceeds capacity ({logs['capacity']})"
            if strict:
                raise AssertionError(msg)
            logs["sanity_warnings"].append(msg + " -> marked infeasible in logs")
            logs["infeasible"] = True

    if logs["solution_size"] is not None and logs["solution_size"] < 0:
        msg = f"solution_size ({logs['solution_size']}) negative"
        if strict:
            raise AssertionError(msg)
        logs["sanity_warnings"].append(msg + " -> set to 0")
        logs["solution_size"] = 0

    return logs

# ==============================================================================
# --- Input normalisation ---
# ==============================================================================

def _as_non_negative_int(x, name):
    if isinstance(x, bool) or not isinstance(x, numbers.Integral):
        raise TypeError(f"{name} must be an integer, got {type(x).__name__}")
    x = int(x)
    if x < 0:
        raise ValueError(f"{name} must be non-negative, got {x}")
    return x

def _field(item, name, idx):
    if isinstance(item, Mapping):
        if name not in item:
            raise TypeError(f"item {idx} has no '{name}' key")
        raw = item[name]
    else:
        try:
            raw = getattr(item, name)
        except AttributeError:
            raise TypeError(f"item {idx} has no '{name}' accessor") from None
        if callable(raw):
            raw = raw()
    return _as_non_negative_int(raw, f"item {idx} {name}")

def _normalise(items, capacity) -> Tuple[List[int], List[int], int]:
    """Validate inputs and split them into parallel weight/value lists."""
    capacity = _as_non_negative_int(capacity, "capacity")
    weights = []
    values = []
    for idx, it in enumerate(items):
        weights.append(_field(it, "weight", idx))
        values.append(_field(it, "value", idx))
    return weights, values, capacity

def selection_totals(items: Sequence[Any], indices: Sequence[int]) -> Tuple[int, int]:
    """Return (total_weight, total_value) of the items at `indices`."""
    total_w = 0
    total_v = 0
    for i in indices:
        total_w += _field(items[i], "weight", i)
        total_v += _field(items[i], "value", i)
    return total_w, total_v

# ==============================================================================
# --- Dynamic programming ---
# ==============================================================================

def _fill_tables(weights: List[int], values: List[int], capacity: int):
    n = len(weights)
    dp = np.zeros((n + 1, capacity + 1), dtype=np.int64)
    keep = np.zeros((n + 1, capacity + 1), dtype=np.bool_)

    for i in range(1, n + 1):
        w = weights[i - 1]
        v = values[i - 1]
        prev = dp[i - 1]
        # cells below the item's weight just carry forward
        dp[i] = prev
        if w > capacity:
            continue
        candidate = prev[:capacity + 1 - w] + v
        baseline = prev[w:]
        take = candidate > baseline
        dp[i, w:] = np.where(take, candidate, baseline)
        keep[i, w:] = take
    return dp, keep

def build_tables(items: Sequence[Any], capacity: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the (N+1) x (C+1) value and decision tables.

    values[i][c] is the best total value using the first i items within weight c;
    keep[i][c] is True when that optimum includes items[i-1]. An item is only
    taken when it strictly improves on leaving it out. Column 0 is non-zero only
    when zero-weight items carry value.
    """
    weights, values, capacity = _normalise(items, capacity)
    return _fill_tables(weights, values, capacity)

def reconstruct(keep: np.ndarray, weights: Sequence[int]) -> List[int]:
    """
    Walk the decision table back from the bottom-right cell.

    Indices come out in decreasing order, i.e. the order they are discovered.
    """
    c = keep.shape[1] - 1
    chosen = []
    for i in range(keep.shape[0] - 1, 0, -1):
        if keep[i, c]:
            chosen.append(i - 1)
            c -= int(weights[i - 1])
    return chosen

def knapsack(items: Sequence[Packable], capacity: int) -> List[int]:
    """
    Return the indices of the items to pack for maximum value within `capacity`.

    Ties go to leaving the later item out, so the result is deterministic.
    A capacity of 0 packs nothing, zero-weight items included.
    Raises ValueError for negative capacity, weights or values.
    """
    weights, values, capacity = _normalise(items, capacity)
    if capacity == 0:
        return []
    _, keep = _fill_tables(weights, values, capacity)
    return reconstruct(keep, weights)

def solve_arrays(weights: Sequence[int], values: Sequence[int], capacity: int) -> List[int]:
    """Same as knapsack() but takes parallel weight and value sequences."""
    if len(weights) != len(values):
        raise ValueError(
            f"weights and values differ in length ({len(weights)} != {len(values)})"
        )
    return knapsack([Item(w, v) for w, v in zip(weights, values)], capacity)

def knapsack_value(items: Sequence[Packable], capacity: int) -> int:
    """
    Optimal total value only, using a single rolling row (O(capacity) memory).

    No selection can be recovered from this; use knapsack() for that.
    """
    weights, values, capacity = _normalise(items, capacity)
    if capacity == 0:
        return 0
    dp = np.zeros(capacity + 1, dtype=np.int64)
    for w, v in zip(weights, values):
        if w > capacity:
            continue
        # right-hand side is evaluated before assignment, so it reads the previous row
        dp[w:] = np.maximum(dp[w:], dp[:capacity + 1 - w] + v)
    return int(dp[capacity])

@accept_instance
def dynamic_programming_solver(items, capacity, seed=None, memory_guard=DEFAULT_MEMORY_GUARD):
    """
    2D dynamic programming knapsack solver with reconstruction.

    Returns (chosen_indices, total_value, logs)
    """
    start = time.perf_counter()
    weights, values, capacity = _normalise(items, capacity)
    n = len(weights)

    approx_cells = (n + 1) * (capacity + 1)
    if approx_cells > memory_guard:
        logger.warning(
            "DP large: approx cells=%d exceeds memory_guard=%d. Tables may not fit in memory.",
            approx_cells, memory_guard
        )

    if capacity == 0:
        logs = _base_logs("capacity 0: nothing packed", time.perf_counter() - start,
                          final_value=0, final_weight=0, solution_size=0, seed=seed,
                          params={"method": "2D_DP_full", "n": n}, capacity=capacity)
        return [], 0, logs

    try:
        dp, keep = _fill_tables(weights, values, capacity)
    except MemoryError:
        logger.error("MemoryError allocating DP tables (n=%d, capacity=%d).", n, capacity)
        raise

    chosen = reconstruct(keep, weights)
    total_value = int(dp[n, capacity])
    total_weight = sum(weights[i] for i in chosen)

    logs = _base_logs(
        "DP finished",
        time.perf_counter() - start,
        final_value=total_value,
        final_weight=total_weight,
        solution_size=len(chosen),
        seed=seed,
        params={"method": "2D_DP_full", "n": n, "cells": approx_cells},
        capacity=capacity
    )
    logger.debug("DP finished: n=%d capacity=%d value=%d picked=%d",
                 n, capacity, total_value, len(chosen))
    return chosen, total_value, logs

# ==============================================================================
# --- Reference solver ---
# ==============================================================================

@accept_instance
def exhaustive_solver(items, capacity, seed=None, max_items=DEFAULT_MAX_EXHAUSTIVE_ITEMS):
    """
    Exhaustive include/exclude search, pruned only on capacity.
    Exponential in n: intended for cross-checking on small instances.
    Like the DP solvers, a capacity of 0 packs nothing.
    """
    start = time.perf_counter()
    weights, values, capacity = _normalise(items, capacity)
    n = len(weights)
    if n > max_items:
        raise ValueError(f"exhaustive_solver: {n} items exceeds max_items={max_items}")
    if capacity == 0:
        logs = _base_logs("capacity 0: nothing packed", time.perf_counter() - start,
                          final_value=0, final_weight=0, solution_size=0, seed=seed,
                          params={"method": "exhaustive", "nodes_explored": 0}, capacity=capacity)
        return [], 0, logs

    best_value = -math.inf
    best_choice = []
    nodes = 0

    def dfs(i, cur_w, cur_v, choice):
        nonlocal best_value, best_choice, nodes
        nodes += 1
        if i == n:
            if cur_v > best_value:
                best_value = cur_v
                best_choice = choice[:]
            return

        if cur_w + weights[i] <= capacity:
            choice.append(i)
            dfs(i + 1, cur_w + weights[i], cur_v + values[i], choice)
            choice.pop()
        dfs(i + 1, cur_w, cur_v, choice)

    dfs(0, 0, 0, [])

    total_weight = sum(weights[i] for i in best_choice)
    logs = _base_logs(
        "exhaustive finished",
        time.perf_counter() - start,
        final_value=best_value,
        final_weight=total_weight,
        solution_size=len(best_choice),
        seed=seed,
        params={"method": "exhaustive", "nodes_explored": nodes},
        capacity=capacity
    )
    return best_choice, int(best_value), logs
