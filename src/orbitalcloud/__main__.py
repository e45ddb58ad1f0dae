"""
Command-Line Interface
======================
Samples one orbital and prints a summary.

Usage:
    $ python -m orbitalcloud --z 6 --n 2 --l 1 --m 1 --samples 5000 --seed 7
    $ orbitalcloud --z 1 --samples 20000 --plot
    $ orbitalcloud --z 8 --n 3 --l 2 --output cloud.vtp
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from orbitalcloud import __version__
from orbitalcloud.config import SamplerSettings
from orbitalcloud.diagnostics import expected_mean_radius, mean_radius, plot_radial_distribution
from orbitalcloud.logging_config import setup_logging
from orbitalcloud.model.request import SampleRequest
from orbitalcloud.physics.density import density_model_for
from orbitalcloud.sampling.sampler import OrbitalSampler
from orbitalcloud.utils import bohr_to_angstrom

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="orbitalcloud",
        description="Sample a hydrogenic orbital as a weighted point cloud.",
    )
    parser.add_argument("--z", type=int, default=1, help="Atomic number (default: 1)")
    parser.add_argument("--n", type=int, default=1, help="Principal quantum number (default: 1)")
    parser.add_argument("--l", type=int, default=0, help="Angular momentum quantum number (default: 0)")
    parser.add_argument("--m", type=int, default=0, help="Magnetic quantum number (default: 0)")
    parser.add_argument("--samples", type=int, default=10_000, help="Number of vertices (default: 10000)")
    parser.add_argument("--seed", type=int, default=0, help="Random seed (default: 0)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="INFO", help="Console log level")
    parser.add_argument("--log-file", type=Path, default=None, help="Optional log file path")
    parser.add_argument("--plot", action="store_true", help="Show the radial distribution plot")
    parser.add_argument("--output", type=Path, default=None, help="Write the cloud to a .vtp file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(
        level=getattr(logging, args.log_level),
        log_file=str(args.log_file) if args.log_file else None,
    )

    try:
        settings = SamplerSettings.from_env()
        request = SampleRequest(args.z, args.n, args.l, args.m, args.samples, args.seed)
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 2

    result = OrbitalSampler(settings).sample(request)
    model = density_model_for(request.orbital, request.element)

    print(f"Element:       {request.element}")
    print(f"Orbital:       {request.orbital.label} [{model.family}]")
    print(f"Method:        {result.method}")
    print(f"Vertices:      {len(result)} ({result.fallback_count} fallback)")
    print(f"Box exhausted: {result.box_exhausted}")
    radius = mean_radius(result)
    print(f"Mean radius:   {radius:.4f} a0 = {bohr_to_angstrom(radius):.4f} Å "
          f"(hydrogenic {expected_mean_radius(request.orbital, request.element):.4f} a0)")

    if args.output is not None:
        result.to_polydata().save(str(args.output))
        logger.info(f"Wrote {len(result)} points to {args.output}")

    if args.plot:
        plot_radial_distribution(result, model)

    return 0


if __name__ == "__main__":
    sys.exit(main())
