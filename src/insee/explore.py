#!/usr/bin/env python3
"""Explore the dimensions and IDBanks of a single INSEE dataset."""

from . import client
from .search import extract_dimensions, format_error_message


MAX_VALUES_SHOWN = 15
SAMPLE_ROWS = 10


# === Functional Core (Pure Functions - No I/O) ===

def format_dimension_values(dim, values, max_shown=MAX_VALUES_SHOWN):
    """Format one dimension line: name, unique count, then values.

    Args:
        dim: Dimension column name
        values: Iterable of the dimension's values
        max_shown: Number of unique values listed before '...'

    Returns:
        String like '- SEXE (3 values): 1, 2, 0'
    """
    unique_vals = [str(v) for v in dict.fromkeys(values)]
    shown = ', '.join(unique_vals[:max_shown])
    if len(unique_vals) > max_shown:
        shown += ' ...'
    return f"- {dim} ({len(unique_vals)} values): {shown}"


# === I/O Layer ===

def explore_dataset(dataset_id, show_sample=True):
    """Print the structure of a dataset and return its full IDBank table.

    Args:
        dataset_id: INSEE dataset identifier (e.g. 'CHOMAGE-TRIM-NATIONAL')
        show_sample: Whether to print the first rows of the table

    Returns:
        DataFrame of all IDBanks, or None if the dataset could not be fetched
    """
    print(f"\nExploring dataset: {dataset_id}")
    print("=" * 60 + "\n")

    try:
        idbanks = client.get_idbank_list(dataset_id)
    except Exception as e:
        print(f"Error: {format_error_message(e)}")
        return None

    print(f"Total number of IDBanks: {len(idbanks)}\n")

    print("Available columns:")
    print(list(idbanks.columns))
    print()

    print("Dimensions and values:")
    for dim in extract_dimensions(idbanks.columns):
        print(f"   {format_dimension_values(dim, idbanks[dim])}")
    print()

    if show_sample:
        print(f"Data sample (first {SAMPLE_ROWS} rows):")
        print(idbanks.head(SAMPLE_ROWS))

    return idbanks
