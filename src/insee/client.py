#!/usr/bin/env python3
"""Fetch the INSEE dataset catalog and IDBank lists from the BDM SDMX API."""

import xml.etree.ElementTree as ET
import pandas as pd
import requests


API_BASE = "https://bdm.insee.fr/series/sdmx"
REQUEST_TIMEOUT = 60

XML_LANG = '{http://www.w3.org/XML/1998/namespace}lang'


class InseeError(Exception):
    """Base error for calls to the INSEE API."""


class CatalogUnavailable(InseeError):
    """The dataset catalog could not be retrieved."""


class DatasetUnavailable(InseeError):
    """The IDBank list of one dataset could not be retrieved."""


# === Functional Core (Pure Functions - No I/O) ===

def local_name(tag):
    """Strip the XML namespace from a tag: '{ns}Dataflow' -> 'Dataflow'."""
    return tag.rsplit('}', 1)[-1]


def parse_dataflows(content):
    """Parse an SDMX dataflow message into catalog rows.

    Args:
        content: Raw XML bytes from the dataflow endpoint

    Returns:
        DataFrame with columns id, Name, Name.en, url (one row per dataflow,
        in document order)
    """
    root = ET.fromstring(content)

    rows = []
    for flow in root.iter():
        if local_name(flow.tag) != 'Dataflow':
            continue

        names = {}
        url = None
        for child in flow:
            tag = local_name(child.tag)
            if tag == 'Name':
                names[child.get(XML_LANG, 'fr')] = (child.text or '').strip()
            elif tag == 'Annotations':
                # INSEE publishes the dataset web page as an annotation URL
                for node in child.iter():
                    if local_name(node.tag) == 'AnnotationURL' and url is None:
                        url = (node.text or '').strip()

        rows.append({
            'id': flow.get('id'),
            'Name': names.get('fr'),
            'Name.en': names.get('en'),
            'url': url
        })

    return pd.DataFrame(rows, columns=['id', 'Name', 'Name.en', 'url'])


def parse_series(content):
    """Parse an SDMX structure-specific data message into IDBank rows.

    Every Series element becomes one row whose columns are the series
    attributes (dimension values plus IDBANK, titles, units...).

    Args:
        content: Raw XML bytes from the data endpoint (detail=nodata)

    Returns:
        DataFrame with IDBANK as first column when present (empty if the
        message holds no series)
    """
    root = ET.fromstring(content)

    rows = [dict(el.attrib) for el in root.iter() if local_name(el.tag) == 'Series']
    if not rows:
        return pd.DataFrame()

    columns = []
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    if 'IDBANK' in columns:
        columns.remove('IDBANK')
        columns.insert(0, 'IDBANK')

    return pd.DataFrame(rows, columns=columns)


# === I/O Layer ===

def _get(url, params=None):
    headers = {'User-Agent': 'Mozilla/5.0', 'Accept': 'application/xml'}
    resp = requests.get(url, headers=headers, params=params, timeout=REQUEST_TIMEOUT)
    resp.raise_for_status()
    return resp.content


def get_dataset_list():
    """Fetch the full INSEE catalog of datasets.

    Raises:
        CatalogUnavailable: If the request or the XML parsing fails
    """
    url = f"{API_BASE}/dataflow/FR1"
    try:
        return parse_dataflows(_get(url))
    except (requests.RequestException, ET.ParseError) as e:
        raise CatalogUnavailable(f"Could not fetch dataset list: {e}") from e


def get_idbank_list(dataset_id):
    """Fetch the IDBank (series metadata) table of one dataset.

    Raises:
        DatasetUnavailable: If the request or the XML parsing fails
    """
    url = f"{API_BASE}/data/{dataset_id}"
    try:
        return parse_series(_get(url, params={'detail': 'nodata'}))
    except (requests.RequestException, ET.ParseError) as e:
        raise DatasetUnavailable(f"Could not fetch IDBanks for {dataset_id}: {e}") from e
