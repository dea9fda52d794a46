"""
Static lookup tables used by the extraction heuristics.

All tables are built once at import time and exposed read-only, so any
number of concurrent extractions can share them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

# Known publishers keyed by a domain substring. Checked in insertion order.
DOMAIN_ORGANIZATIONS: Mapping[str, str] = MappingProxyType(
    {
        "abs.gov.au": "Australian Bureau of Statistics",
        "data.gov.au": "Australian Government",
        "worldbank.org": "World Bank",
        "un.org": "United Nations",
        "who.int": "World Health Organization",
        "oecd.org": "Organisation for Economic Co-operation and Development",
        "imf.org": "International Monetary Fund",
        "eurostat.ec.europa.eu": "European Commission (Eurostat)",
        "ons.gov.uk": "Office for National Statistics (UK)",
        "census.gov": "United States Census Bureau",
        "bls.gov": "Bureau of Labor Statistics (US)",
        "stats.govt.nz": "Statistics New Zealand",
        "statcan.gc.ca": "Statistics Canada",
        "github.com": "GitHub",
        "kaggle.com": "Kaggle",
        "data.world": "Data.World",
        "figshare.com": "Figshare",
        "zenodo.org": "Zenodo",
        "arxiv.org": "arXiv",
        "researchgate.net": "ResearchGate",
        "scholar.google.com": "Google Scholar",
        "ieee.org": "IEEE",
        "acm.org": "Association for Computing Machinery",
        "nature.com": "Nature",
        "science.org": "Science",
        "springer.com": "Springer",
        "wiley.com": "Wiley",
        "tandfonline.com": "Taylor & Francis",
        "sciencedirect.com": "Elsevier",
        "jstor.org": "JSTOR",
    }
)

# Custodians recognised from the URL host alone.
HOST_CUSTODIANS: Mapping[str, str] = MappingProxyType(
    {
        "abs.gov.au": "Australian Bureau of Statistics",
        "data.gov.au": "Australian Government",
    }
)

# Government, statistical and academic publishers worth a reputation bonus.
REPUTABLE_DOMAINS: Tuple[str, ...] = (
    "abs.gov.au",
    "data.gov.au",
    "worldbank.org",
    "un.org",
    "who.int",
    "oecd.org",
    "imf.org",
    "eurostat.ec.europa.eu",
    "ons.gov.uk",
    "census.gov",
    "bls.gov",
    "stats.govt.nz",
    "statcan.gc.ca",
    "nature.com",
    "science.org",
    "arxiv.org",
    "ieee.org",
    "acm.org",
)

TOPIC_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "Population & Demographics": (
            "population", "demographics", "census", "birth", "death", "migration", "age", "gender",
        ),
        "Economics & Finance": (
            "economics", "finance", "gdp", "inflation", "unemployment", "employment", "income", "poverty", "wealth",
        ),
        "Health & Medicine": (
            "health", "medical", "disease", "hospital", "doctor", "patient", "mortality", "morbidity", "vaccination",
        ),
        "Education": (
            "education", "school", "university", "student", "teacher", "academic", "learning", "literacy",
        ),
        "Transport & Infrastructure": (
            "transport", "traffic", "road", "rail", "airport", "infrastructure", "public transport",
        ),
        "Environment & Climate": (
            "environment", "climate", "pollution", "emissions", "renewable", "sustainability", "biodiversity",
        ),
        "Social Issues": (
            "social", "welfare", "housing", "crime", "justice", "inequality", "discrimination",
        ),
        "Technology": (
            "technology", "digital", "internet", "software", "hardware", "ai", "machine learning", "cybersecurity",
        ),
        "Agriculture": ("agriculture", "farming", "crop", "livestock", "food", "rural"),
        "Energy": ("energy", "electricity", "oil", "gas", "renewable", "solar", "wind"),
        "Government & Politics": ("government", "politics", "policy", "legislation", "election", "voting"),
        "Business & Industry": ("business", "industry", "manufacturing", "retail", "service", "trade", "export"),
        "Science & Research": ("science", "research", "study", "experiment", "laboratory", "discovery"),
        "Culture & Arts": ("culture", "arts", "music", "film", "literature", "heritage", "tourism"),
    }
)

# Data indicators appended to topics after the categories: label -> triggers.
SPECIFIC_TERMS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Dataset", ("dataset", "data set")),
    ("Statistics", ("statistics", "statistical")),
    ("Survey", ("survey", "poll")),
    ("Report", ("report", "analysis")),
    ("Research", ("research", "study")),
    ("API", ("api", "endpoint")),
    ("Database", ("database", "db")),
)

FILE_FORMAT_TOKENS: Tuple[str, ...] = ("csv", "json", "xml", "excel", "xlsx", "xls", "pdf", "txt", "zip", "rdf")

DATA_TYPE_KEYWORDS: Tuple[str, ...] = (
    "statistical", "numerical", "categorical", "time series", "geospatial", "spatial",
    "survey", "census", "administrative", "transactional", "log data", "big data",
    "structured data", "unstructured data", "semi-structured", "relational",
    "no-sql", "graph data", "time-series", "panel data", "cross-sectional",
)

# Access-method and domain indicators: tag -> triggers.
DATA_TYPE_INDICATORS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("API", ("api", "rest", "endpoint")),
    ("Database", ("database", "db")),
    ("Tabular", ("spreadsheet", "table")),
    ("Demographic", ("population", "demographics")),
    ("Economic", ("economic", "financial", "gdp")),
    ("Health", ("health", "medical")),
    ("Education", ("education", "school")),
    ("Transport", ("transport", "traffic")),
    ("Environmental", ("environment", "climate")),
)

COMMON_TAGS: Tuple[str, ...] = ("dataset", "data", "statistics", "open data", "public data")
