"""
The MODEL layer holds the immutable value types of the core: elements,
nuclei, orbitals and the request/result records.
It has no knowledge of densities, sampling or rendering.
"""
