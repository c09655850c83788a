#!/usr/bin/env python3
"""Save search results to disk (pickle snapshot + CSV tables)."""

import re
from datetime import datetime
from pathlib import Path
import pandas as pd


TIMESTAMP_FORMAT = '%Y%m%d_%H%M%S'
DIMENSION_SEPARATOR = '; '


# === Functional Core (Pure Functions - No I/O) ===

def sanitize_keyword(keyword):
    """Replace every non-alphanumeric character with an underscore.

    Args:
        keyword: Search keyword (str)

    Returns:
        Filename-safe token like 'prix_a_la_consommation'
    """
    return re.sub(r'[^0-9A-Za-z]', '_', keyword)


def format_timestamp(now):
    """Format a datetime as a compact, second-resolution filename token."""
    return now.strftime(TIMESTAMP_FORMAT)


def build_output_paths(output_dir, keyword, dataset_ids, timestamp):
    """Compute every file path written by one export.

    Args:
        output_dir: Output directory (str or Path)
        keyword: Raw search keyword
        dataset_ids: Dataset identifiers in result order
        timestamp: Formatted timestamp shared by all files

    Returns:
        Dict with 'snapshot', 'summary' and 'datasets' (dataset_id -> Path)
    """
    out = Path(output_dir)
    base = sanitize_keyword(keyword)
    return {
        'snapshot': out / f"{base}_{timestamp}.pkl",
        'summary': out / f"{base}_{timestamp}_summary.csv",
        'datasets': {
            dataset_id: out / f"{base}_{dataset_id}_{timestamp}.csv"
            for dataset_id in dataset_ids
        }
    }


def build_summary_table(results):
    """Flatten a result set into one row per dataset.

    Args:
        results: Dict of dataset_id -> dataset result dict

    Returns:
        DataFrame with columns dataset_id, dataset_name, n_idbanks, dimensions
    """
    rows = [
        {
            'dataset_id': r['dataset_id'],
            'dataset_name': r['dataset_name'],
            'n_idbanks': r['n_idbanks'],
            'dimensions': DIMENSION_SEPARATOR.join(r['dimensions'])
        }
        for r in results.values()
    ]
    return pd.DataFrame(rows, columns=['dataset_id', 'dataset_name', 'n_idbanks', 'dimensions'])


# === I/O Layer ===

def save_results(results, keyword, output_dir, now=None):
    """Write the snapshot, the summary CSV and one CSV per dataset.

    Files already written stay on disk if a later write fails.

    Args:
        results: Dict of dataset_id -> dataset result dict
        keyword: Raw search keyword (sanitized for filenames)
        output_dir: Directory to write into, created if missing
        now: Datetime used for the shared timestamp (default: current time)

    Returns:
        List of written Paths in write order
    """
    timestamp = format_timestamp(now or datetime.now())
    paths = build_output_paths(output_dir, keyword, list(results), timestamp)

    Path(output_dir).mkdir(parents=True, exist_ok=True)

    # Second resolution: two exports for the same keyword within one second collide
    if paths['snapshot'].exists():
        print(f"   Warning: {paths['snapshot']} already exists and will be overwritten")

    written = []

    pd.to_pickle(results, paths['snapshot'])
    print(f"   ✓ Full results: {paths['snapshot']}")
    written.append(paths['snapshot'])

    build_summary_table(results).to_csv(paths['summary'], index=False)
    print(f"   ✓ Summary CSV: {paths['summary']}")
    written.append(paths['summary'])

    for dataset_id, result in results.items():
        dataset_path = paths['datasets'][dataset_id]
        result['idbanks'].to_csv(dataset_path, index=False)
        print(f"   ✓ IDBanks {dataset_id}: {dataset_path}")
        written.append(dataset_path)

    return written


def load_results(path):
    """Reload a result set written by save_results()."""
    return pd.read_pickle(path)
