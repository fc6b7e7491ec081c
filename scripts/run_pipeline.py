#!/usr/bin/env python3
"""
Credit Score Preparation CLI

Usage:
    # Run with YAML config (recommended):
    python scripts/run_pipeline.py --config config/pipeline.yaml

    # Override specific settings via CLI:
    python scripts/run_pipeline.py \
        --config config/pipeline.yaml \
        --input data/train.csv \
        --infer-schema-rows 10000

    # No YAML, defaults plus CLI args:
    python scripts/run_pipeline.py --input data/train.csv
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = str(Path(__file__).resolve().parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from credit_prep.config.loader import load_config, save_config
from credit_prep.core.exceptions import ConfigurationError
from credit_prep.io.output_manager import OutputManager
from credit_prep.pipeline.orchestrator import PipelineOrchestrator


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Credit Score Dataset Preparation Pipeline',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        '--config', default=None,
        help='Path to YAML config file (e.g., config/pipeline.yaml)',
    )
    parser.add_argument(
        '--input', default=None,
        help='Path to the credit score CSV (overrides config)',
    )
    parser.add_argument(
        '--output-dir', default=None,
        help='Base directory for run outputs',
    )
    parser.add_argument(
        '--infer-schema-rows', type=int, default=None,
        help='Leading rows sampled to infer column types',
    )
    parser.add_argument(
        '--target-column', default=None,
        help='Indicator column used as the training target',
    )
    parser.add_argument(
        '--zero-variance', default=None, choices=['nan', 'raise'],
        help='Correlation policy for constant columns',
    )
    parser.add_argument(
        '--log-level', default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Console log level',
    )

    return parser.parse_args(argv)


def _build_cli_overrides(args) -> dict:
    """Build a flat dot-notation override dict from CLI args."""
    overrides = {}

    if args.input is not None:
        overrides["data.input_path"] = args.input
    if args.output_dir is not None:
        overrides["output.base_dir"] = args.output_dir
    if args.infer_schema_rows is not None:
        overrides["data.infer_schema_rows"] = args.infer_schema_rows
    if args.target_column is not None:
        overrides["training.target_column"] = args.target_column
    if args.zero_variance is not None:
        overrides["correlation.zero_variance"] = args.zero_variance
    if args.log_level is not None:
        overrides["reproducibility.log_level"] = args.log_level

    return overrides


def main(argv=None) -> int:
    args = parse_args(argv)

    try:
        config = load_config(yaml_path=args.config, cli_overrides=_build_cli_overrides(args))
    except ConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    output_manager = OutputManager(config)

    if config.reproducibility.save_config:
        save_config(config, str(output_manager.run_dir / "config" / "pipeline_config.yaml"))

    orchestrator = PipelineOrchestrator(config, output_manager)
    result = orchestrator.run_all()

    print(f"\n{'='*60}")
    print(f"Pipeline completed: {result.status}")
    if result.correlation is not None:
        print(f"Correlated columns: {result.correlation.size}")
    if result.final_df is not None:
        print(f"Final dataset: {len(result.final_df):,} rows")
    for name, path in result.artifacts.items():
        print(f"  {name}: {path}")
    print(f"Run directory: {output_manager.run_dir}")
    print(f"Log file: {output_manager.get_log_path()}")
    print(f"{'='*60}")

    return 0 if result.status == "success" else 1


if __name__ == '__main__':
    sys.exit(main())
