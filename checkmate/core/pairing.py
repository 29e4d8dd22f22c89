#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Checkmate - Mate-call Pairing
Deterministic weekly caller/partner matching

Every day of a week re-derives the same pairs from (seed, pool size, row count),
so nothing but the resulting names has to be stored.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, TypeVar

T = TypeVar("T")

# ===== CONSTANTS =====

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

REFILL_SEED_STEP = 541
INTERLEAVE_SEED_OFFSET = 9999

NO_PARTICIPANT = -1

# ===== PRNG =====

class SeededRandom:
    """Linear congruential generator; each call to random() advances the state once"""

    def __init__(self, seed: int):
        self.state = seed

    def random(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS

def seeded_shuffle(items: Sequence[T], seed: int) -> List[T]:
    """Fisher-Yates shuffle driven by SeededRandom. The input is left untouched."""
    result = list(items)
    rng = SeededRandom(seed)
    for i in range(len(result) - 1, 0, -1):
        j = math.floor(rng.random() * (i + 1))
        result[i], result[j] = result[j], result[i]
    return result

# ===== PAIRS =====

@dataclass(frozen=True)
class Pair:
    """Indices into the active roster; -1 means nobody is assigned"""
    caller_idx: int
    partner_idx: int

    @property
    def is_self_pair(self) -> bool:
        return self.caller_idx == self.partner_idx and self.caller_idx != NO_PARTICIPANT

    def to_dict(self) -> Dict[str, Any]:
        return {"callerIdx": self.caller_idx, "partnerIdx": self.partner_idx}

def _draw_slots(row_count: int, pool_size: int, seed: int) -> List[int]:
    indices = list(range(pool_size))
    total_slots = row_count * 2

    # The first batch holds every participant once, later batches only top up
    pool = seeded_shuffle(indices, seed)
    refill = 0
    while len(pool) < total_slots:
        refill += 1
        pool.extend(seeded_shuffle(indices, seed + REFILL_SEED_STEP * refill))

    slots = pool[:total_slots]
    return seeded_shuffle(slots, seed + INTERLEAVE_SEED_OFFSET)

def generate_pairs_unresolved(row_count: int, pool_size: int, seed: int) -> List[Pair]:
    """Pairs as drawn, before self-pairings are resolved"""
    if pool_size <= 0:
        return [Pair(NO_PARTICIPANT, NO_PARTICIPANT) for _ in range(row_count)]

    slots = _draw_slots(row_count, pool_size, seed)
    return [Pair(slots[i * 2], slots[i * 2 + 1]) for i in range(row_count)]

def resolve_self_pairs(pairs: Sequence[Pair], pool_size: int) -> List[Pair]:
    """
    One forward pass: a row paired with itself swaps partners with the next row
    (wrapping around). Conflicts left after the pass are kept.
    """
    rows = [[pair.caller_idx, pair.partner_idx] for pair in pairs]
    if pool_size > 1:
        for i in range(len(rows)):
            if rows[i][0] == rows[i][1]:
                next_row = (i + 1) % len(rows)
                rows[i][1], rows[next_row][1] = rows[next_row][1], rows[i][1]
    return [Pair(caller, partner) for caller, partner in rows]

def generate_pairs(row_count: int, pool_size: int, seed: int) -> List[Pair]:
    """
    Build `row_count` caller/partner pairs from a pool of `pool_size` participants.

    Every participant appears at least once when pool_size <= row_count * 2, and
    the result depends only on the arguments.
    """
    return resolve_self_pairs(generate_pairs_unresolved(row_count, pool_size, seed), pool_size)

def count_self_pairs(pairs: Sequence[Pair]) -> int:
    return sum(1 for pair in pairs if pair.is_self_pair)
