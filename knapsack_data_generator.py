"""
Purpose:
- Generate reproducible 0/1 knapsack problem instances at multiple scales, in memory.
- Supports: seed-based reproducibility, distributions, positive/negative correlation,
  capacity ratio and batch generation.

Usage:
- items = generate_instance(12, seed=7)["items"]; knapsack_solvers.knapsack(items, cap)

Notes:
- Reproducibility: each instance stores the seed used in meta.
  Regenerating with the same seed + parameters produces identical items.
- Capacity_ratio controls hardness: smaller ratios generally make packing harder.
- (weight_dist / value_dist):
    > uniform : uniform sampling
    > normal : bell-curve around mid-range
    > zipf : few large, many small
- Correlation:
    > positive: value proportional to weight with gaussian noise
    > negative: value roughly inverse to weight with noise
"""

import random
from typing import List, Tuple, Optional, Dict

DISTRIBUTIONS = ("uniform", "normal", "zipf")
CORRELATIONS = (None, "positive", "negative")

# --- Utilities / RNG ---
def _get_rng(seed: Optional[int]):
    """Return (seed_used, random.Random instance)."""
    if seed is None:
        seed = random.randrange(0, 2**32)
    rng = random.Random(seed)
    return seed, rng

def _check_range(name: str, bounds: Tuple[int, int]):
    low, high = bounds
    if low < 0 or high < low:
        raise ValueError(f"{name} must satisfy 0 <= low <= high, got {bounds}")

# --- Value/weight sampling functions ---
def _sample_uniform(rng: random.Random, low: int, high: int) -> int:
    return rng.randint(low, high)

def _sample_normal_int(rng: random.Random, mean: float, std: float, low: int, high: int) -> int:
    # redraw a few times before clamping
    for _ in range(10):
        val = int(round(rng.gauss(mean, std)))
        if low <= val <= high:
            return val
    return max(low, min(high, int(round(mean))))

def _sample_zipf_int(rng: random.Random, a: float, low: int, high: int) -> int:
    # inverse transform of a Pareto tail, clamped to [low, high]
    x = rng.random()
    pareto = int(low + ((1.0 - x) ** (-1.0 / (a - 1.0))))
    return max(low, min(high, pareto))

def _sample(rng: random.Random, dist: str, low: int, high: int) -> int:
    if dist == "uniform":
        return _sample_uniform(rng, low, high)
    elif dist == "normal":
        mean = (low + high) / 2.0
        std = max(1.0, (high - low) / 6.0)
        return _sample_normal_int(rng, mean, std, low, high)
    elif dist == "zipf":
        return _sample_zipf_int(rng, a=1.8, low=low, high=high)
    raise ValueError("Unknown distribution: " + str(dist))

# --- Instance generator ---
def generate_instance(
    n_items: int,
    weight_range: Tuple[int,int] = (1,100),
    value_range: Tuple[int,int] = (1,100),
    capacity_ratio: float = 0.5,
    correlation: Optional[str] = None,   # None | 'positive' | 'negative'
    weight_dist: str = "uniform",        # 'uniform' | 'normal' | 'zipf'
    value_dist: str = "uniform",         # same options
    seed: Optional[int] = None
) -> Dict:
    """
    Returns a dict:
    {
      "meta": { ... seed, params ... },
      "capacity": int,
      "items": [{"id": 0, "weight": w, "value": v}, ...]
    }
    Reproducible: instance['meta']['seed'] holds the RNG seed used.
    """
    if n_items < 0:
        raise ValueError(f"n_items must be non-negative, got {n_items}")
    _check_range("weight_range", weight_range)
    _check_range("value_range", value_range)
    for dist in (weight_dist, value_dist):
        if dist not in DISTRIBUTIONS:
            raise ValueError("Unknown distribution: " + str(dist))
    if correlation not in CORRELATIONS:
        raise ValueError("Unknown correlation: " + str(correlation))
    if capacity_ratio < 0:
        raise ValueError(f"capacity_ratio must be non-negative, got {capacity_ratio}")

    seed_used, rng = _get_rng(seed)

    wlow, whigh = weight_range
    vlow, vhigh = value_range

    def sample_value_from_weight(w):
        # uncorrelated: draw from value_dist; otherwise derive from weight + noise
        if correlation is None:
            return _sample(rng, value_dist, vlow, vhigh)
        wnorm = (w - wlow) / max(1, (whigh - wlow))
        if correlation == "positive":
            base = vlow + wnorm * (vhigh - vlow)
        else:
            base = vlow + (1.0 - wnorm) * (vhigh - vlow)
        noise = rng.gauss(0, 0.08 * (vhigh - vlow))
        v = int(round(base + noise))
        return max(vlow, min(vhigh, v))

    items = []
    for i in range(n_items):
        w = _sample(rng, weight_dist, wlow, whigh)
        v = sample_value_from_weight(w)
        items.append({"id": i, "weight": int(w), "value": int(v)})

    total_weight = sum(it["weight"] for it in items)
    # At least 1 capacity
    capacity = max(1, int(round(total_weight * capacity_ratio)))

    instance = {
        "meta": {
            "n_items": n_items,
            "weight_range": weight_range,
            "value_range": value_range,
            "capacity_ratio": capacity_ratio,
            "correlation": correlation,
            "weight_dist": weight_dist,
            "value_dist": value_dist,
            "seed": seed_used
        },
        "capacity": int(capacity),
        "items": items
    }
    return instance

# --- Batch generator (multiple scales) ---
def generate_batch(ns: List[int], base_seed: int = 42, **params) -> List[Dict]:
    """
    Generate one instance for each n in ns.
    Instance idx is seeded with (base_seed + idx) & 0xFFFFFFFF; extra keyword
    arguments are passed through to generate_instance.
    """
    instances = []
    for idx, n in enumerate(ns):
        seed = (base_seed + idx) & 0xFFFFFFFF
        instances.append(generate_instance(n_items=n, seed=seed, **params))
    return instances
