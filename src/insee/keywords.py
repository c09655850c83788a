#!/usr/bin/env python3
"""Commonly used keywords for INSEE searches."""

import pandas as pd


POPULAR_KEYWORDS = [
    ('Employment', 'chomage, emploi, travail', 'unemployment, employment, labor'),
    ('Prices & Inflation', 'ipc, inflation, prix', 'cpi, inflation, prices'),
    ('Economy', 'pib, croissance, production', 'gdp, growth, production'),
    ('Trade', 'export, import, commerce', 'export, import, trade'),
    ('Demographics', 'population, naissance, deces', 'population, birth, death'),
    ('Housing', 'logement, construction, immobilier', 'housing, construction, property'),
    ('Income', 'salaire, revenu, pauvrete', 'wage, income, poverty'),
    ('Business', 'entreprise, societe, creation', 'company, firm, creation'),
]


def list_popular_keywords():
    """Print and return the keyword table (category, French and English terms)."""
    print("\nPOPULAR KEYWORDS FOR INSEE SEARCH")
    print("=" * 60 + "\n")

    keywords = pd.DataFrame(
        POPULAR_KEYWORDS,
        columns=['Category', 'French keywords', 'English keywords']
    )
    print(keywords.to_string(index=False))

    print("\nUsage: search_insee('chomage') or search_insee('CPI')\n")
    return keywords
