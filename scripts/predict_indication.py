"""
Predict CT scan indications for a scan table and write the results.

    python scripts/predict_indication.py data/scans.xlsx --output Predictions.xlsx
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from apps.worker.lib.artifact_store import load_fitted_model, load_keyphrase_dictionary
from apps.worker.pipeline import run_pipeline
from packages.shared.errors import ConfigurationError, SchemaError
from packages.shared.models import RunConfig

logger = logging.getLogger("distinct")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Classify CT scans as Surveillance or Other Reasons.")
    ap.add_argument("input", help="Scan table (.csv or .xlsx)")
    ap.add_argument("--output", default="Predictions.xlsx", help="Output file (.xlsx, .csv or .json)")
    ap.add_argument("--no-write", action="store_true", help="Score only, do not write an output file")
    ap.add_argument("--threshold", type=float, default=None, help="Binarization cutoff in [0, 1] (default: model cutoff)")
    ap.add_argument("--interval-months", type=float, default=6, help="Long-gap threshold in months (default: 6)")
    ap.add_argument("--dictionary", default=None, help="Keyphrase dictionary JSON (default: bundled)")
    ap.add_argument("--model", default=None, help="Fitted model JSON (default: bundled)")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = _parse_args(argv)
    config = RunConfig(
        interval_months=args.interval_months,
        binarize_threshold=args.threshold,
        write_file=not args.no_write,
        output_path=args.output,
    )
    try:
        dictionary = load_keyphrase_dictionary(args.dictionary)
        model = load_fitted_model(args.model)
        result = run_pipeline(args.input, config, dictionary=dictionary, model=model)
    except ConfigurationError as exc:
        logger.error(f"Configuration error: {exc}")
        return 2
    except SchemaError as exc:
        logger.error(f"Input error: {exc}")
        return 1

    for label, count in result.label_counts.items():
        print(f"{label}: {count}")
    if result.artifact:
        print(f"Predictions written to file: {result.artifact.uri}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
