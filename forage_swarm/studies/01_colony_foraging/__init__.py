"""
Study 01: Colony Foraging

Questions to explore:
- Does mean food gathered rise as the foragers learn?
- How long does a colony survive between regrowths?
- Do foragers learn to stop walking into the edge?
"""
