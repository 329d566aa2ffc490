"""Generate inspection choropleth maps from cached JSON datasets (no network calls)."""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path so inspection_map is importable without installing
sys.path.insert(0, str(Path(__file__).parent / "src"))

from inspection_map.mapping.map_generator import ChoroplethMapGenerator
from inspection_map.models.schemas import Datasets
from inspection_map.config.settings import settings

logger = logging.getLogger("generate_map_from_cache")


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--data-dir", default="data", help="Directory holding the cached JSON files")
    parser.add_argument("--businesses", default="restaurant_data.json")
    parser.add_argument("--aggregates", default="chloropleth_data.json")
    parser.add_argument("--boundaries", default="sf_boundaries.geojson")
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--run-id", default="manual")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    data_dir = Path(args.data_dir)
    paths = {
        "businesses": data_dir / args.businesses,
        "aggregates": data_dir / args.aggregates,
        "boundaries": data_dir / args.boundaries,
    }
    for label, path in paths.items():
        if not path.exists():
            logger.error(f"{label} file not found: {path}")
            return 1

    loaded = {}
    for label, path in paths.items():
        with open(path) as f:
            loaded[label] = json.load(f)

    datasets = Datasets.from_json(**loaded)
    logger.info(
        f"Loaded {len(datasets.businesses)} businesses, "
        f"{len(datasets.aggregates)} neighborhood aggregates, "
        f"{len(datasets.boundary_features)} boundary features"
    )

    generator = ChoroplethMapGenerator(datasets, output_dir=args.output_dir)
    for result in generator.generate_all(run_id=args.run_id):
        logger.info(
            f"{result.metric}: {result.html_path} "
            f"(domain {result.bounds[0]:.2f}..{result.bounds[1]:.2f})"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
