"""
The PHYSICS layer evaluates orbital probability densities and their exact
radial laws. Hot loops are numba kernels; everything else is plain NumPy/SciPy.
"""
