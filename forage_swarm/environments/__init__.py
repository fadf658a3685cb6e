"""
Worlds for foragers to live in.

- resource_grid: The tile lattice and its resources
- forage_world: Grid + population + clock
"""
