#!/usr/bin/env python3
"""Search INSEE datasets by keyword and extract their IDBanks."""

import os
import sys
import pandas as pd
from pandas.api.types import is_string_dtype
from . import client
from . import export


MAX_DATASETS = 20
MAX_IDBANKS_PER_DATASET = 100
OUTPUT_DIR = 'resultats_recherche'

# Identifier, titles and unit columns; everything else is a dimension
EXCLUDED_COLUMNS = ('idbank', 'IDBANK', 'TITLE_FR', 'TITLE_EN', 'UNIT', 'UNIT_MULT')

SUGGESTIONS = [
    "Try broader terms (e.g. 'emploi' instead of 'chomage')",
    "Try English terms (e.g. 'unemployment', 'CPI', 'GDP')",
    "Check the spelling",
]


# === Functional Core (Pure Functions - No I/O) ===

def find_text_columns(catalog_df):
    """Return the names of the catalog columns holding text values."""
    return [col for col in catalog_df.columns if is_string_dtype(catalog_df[col])]


def match_catalog(catalog_df, keyword):
    """Keep catalog rows where the keyword appears in any text column.

    Matching is a case-insensitive literal substring test, OR-ed across
    every text column. Catalog order is preserved.

    Args:
        catalog_df: Full catalog DataFrame
        keyword: Search keyword (str)

    Returns:
        DataFrame of matching rows
    """
    mask = pd.Series(False, index=catalog_df.index)
    for col in find_text_columns(catalog_df):
        mask = mask | catalog_df[col].str.contains(keyword, case=False, regex=False, na=False)
    return catalog_df[mask]


def limit_rows(df, limit):
    """Keep the first `limit` rows, in their current order."""
    if len(df) > limit:
        return df.head(limit)
    return df


def resolve_dataset_name(row, dataset_id):
    """Pick a display name for a catalog row: 'Name', then 'name', then the id."""
    for col in ('Name', 'name'):
        if col in row.index:
            return row[col]
    return dataset_id


def extract_dimensions(columns):
    """Return every column name that is not an identifier/title/unit column."""
    return [col for col in columns if col not in EXCLUDED_COLUMNS]


def summarize_dimension(values, max_values=10):
    """Describe a dimension by its unique values, or their count when too many.

    Args:
        values: Iterable of dimension values
        max_values: Largest number of values listed explicitly

    Returns:
        'A, B, C' or '42 unique values'
    """
    unique_vals = list(dict.fromkeys(values))
    if len(unique_vals) <= max_values:
        return ', '.join(str(v) for v in unique_vals)
    return f"{len(unique_vals)} unique values"


def build_dataset_result(dataset_id, dataset_name, idbanks, max_idbanks):
    """Assemble the per-dataset result dict, truncating the IDBank table.

    Args:
        dataset_id: Dataset identifier
        dataset_name: Display name
        idbanks: Full IDBank DataFrame returned by the API
        max_idbanks: Maximum number of IDBank rows kept

    Returns:
        Dict with dataset_id, dataset_name, n_idbanks, dimensions, idbanks
    """
    idbanks = limit_rows(idbanks, max_idbanks).reset_index(drop=True)
    return {
        'dataset_id': dataset_id,
        'dataset_name': dataset_name,
        'n_idbanks': len(idbanks),
        'dimensions': extract_dimensions(idbanks.columns),
        'idbanks': idbanks
    }


def format_error_message(error, max_len=80):
    """Return the error message, or its type name if the message is too long."""
    error_str = str(error)
    return type(error).__name__ if len(error_str) > max_len else error_str


# === I/O Layer ===

def print_banner(title):
    print()
    print("=" * 60)
    print(f"{title:^60}")
    print("=" * 60)


def extract_dataset(dataset_id, dataset_name, max_idbanks):
    """Fetch and summarize one dataset's IDBanks.

    Returns:
        Dataset result dict, or None when the dataset is skipped (API error
        or no IDBank)
    """
    try:
        idbanks = client.get_idbank_list(dataset_id)
    except Exception as e:
        print(f"      Error: {format_error_message(e)}")
        idbanks = None

    if idbanks is None or len(idbanks) == 0:
        print("      No IDBank available\n")
        return None

    dimensions = extract_dimensions(idbanks.columns)
    print(f"      {len(idbanks)} IDBanks found")
    print(f"      Dimensions: {', '.join(dimensions)}")
    for dim in dimensions[:3]:
        print(f"         {dim}: {summarize_dimension(idbanks[dim])}")
    print()

    return build_dataset_result(dataset_id, dataset_name, idbanks, max_idbanks)


def search_insee(
    keyword,
    max_datasets=MAX_DATASETS,
    max_idbanks_per_dataset=MAX_IDBANKS_PER_DATASET,
    save_results=True,
    output_dir=OUTPUT_DIR
):
    """Search INSEE datasets for a keyword and extract their IDBanks.

    Args:
        keyword: Case-insensitive search term (French or English)
        max_datasets: Maximum number of matching datasets kept
        max_idbanks_per_dataset: Maximum number of IDBanks kept per dataset
        save_results: Whether to write results to output_dir
        output_dir: Directory for the snapshot and CSV files

    Returns:
        Dict of dataset_id -> dataset result, in catalog order; None if the
        catalog is unavailable or nothing matched
    """
    print_banner("INSEE SEARCH ENGINE - DATASETS & IDBANKS")
    print(f"\nSearching for: '{keyword}'")
    print("=" * 60 + "\n")

    # Step 1: find datasets
    print("STEP 1: Searching datasets...")
    try:
        catalog = client.get_dataset_list()
    except client.CatalogUnavailable as e:
        print(f"   Error while fetching datasets: {e}")
        print("   Unable to retrieve the dataset list")
        return None

    matched = match_catalog(catalog, keyword)

    if len(matched) == 0:
        print(f"   No dataset found for '{keyword}'")
        print("\nSuggestions:")
        for suggestion in SUGGESTIONS:
            print(f"   - {suggestion}")
        print()
        return None

    if len(matched) > max_datasets:
        print(f"   - {len(matched)} datasets found, showing the first {max_datasets}")
        matched = limit_rows(matched, max_datasets)
    else:
        print(f"   - {len(matched)} datasets found\n")

    datasets = [
        (row['id'], resolve_dataset_name(row, row['id']))
        for _, row in matched.iterrows()
    ]

    print("MATCHING DATASETS:")
    print("-" * 60)
    for i, (dataset_id, dataset_name) in enumerate(datasets, start=1):
        print(f"{i}. [{dataset_id}] {dataset_name}")
    print()

    # Step 2: extract IDBanks, one dataset at a time
    print("STEP 2: Extracting IDBanks...\n")
    results = {}
    for i, (dataset_id, dataset_name) in enumerate(datasets, start=1):
        print(f"   [{i}/{len(datasets)}] Processing: {dataset_id}...")
        result = extract_dataset(dataset_id, dataset_name, max_idbanks_per_dataset)
        if result is not None:
            results[dataset_id] = result

    # Step 3: save
    written = []
    if save_results and results:
        print("STEP 3: Saving results...")
        written = export.save_results(results, keyword, output_dir)
        print()

    print_summary(keyword, datasets, results, written)
    return results


def print_summary(keyword, datasets, results, written):
    print_banner("FINAL SUMMARY")
    print()
    print(f"Search: '{keyword}'")
    print(f"Datasets found: {len(datasets)}")
    print(f"Total IDBanks: {sum(r['n_idbanks'] for r in results.values())}\n")

    print("To use these IDBanks in your projects:")
    print("   1. Load the snapshot: results = pandas.read_pickle('file.pkl')")
    print("   2. Access the IDBanks: results['DATASET_ID']['idbanks']")
    print("   3. Download the series with their IDBANK codes\n")

    if written:
        first_dataset = next(iter(results))
        print("Example:")
        print(f"   results = pandas.read_pickle('{written[0]}')")
        print(f"   idbanks = results['{first_dataset}']['idbanks']['IDBANK']\n")


def main():
    """Run a search from the command line.

    Keyword comes from argv[1] (or KEYWORD); MAX_DATASETS, MAX_IDBANKS,
    OUTPUT_DIR and SAVE_RESULTS environment variables override defaults.
    """
    keyword = sys.argv[1] if len(sys.argv) > 1 else os.getenv('KEYWORD')
    if not keyword:
        print("Usage: python -m src.insee.search <keyword>")
        sys.exit(1)

    max_datasets = int(os.getenv('MAX_DATASETS')) if os.getenv('MAX_DATASETS') else MAX_DATASETS
    max_idbanks = int(os.getenv('MAX_IDBANKS')) if os.getenv('MAX_IDBANKS') else MAX_IDBANKS_PER_DATASET
    output_dir = os.getenv('OUTPUT_DIR', OUTPUT_DIR)
    save = os.getenv('SAVE_RESULTS', 'true').lower() not in ('0', 'false', 'no')

    search_insee(
        keyword,
        max_datasets=max_datasets,
        max_idbanks_per_dataset=max_idbanks,
        save_results=save,
        output_dir=output_dir
    )


if __name__ == '__main__':
    main()
