"""
Simulation primitives (sim time, RNG streams, frame scheduling, data contracts).

Kept small so entity and driver code never has to reach for wall-clock time or
the global `random` module directly.
"""
