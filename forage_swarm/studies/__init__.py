"""
Studies: Structured runs for watching foragers learn.

Each study begins with observation, not hypothesis.

Study progression:
1. Colony foraging - watch a population learn where the food is
"""
