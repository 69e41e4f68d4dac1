"""Pytest configuration and fixtures for filter engine tests."""

from pathlib import Path
import sys

import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.filtering.fields import field_from_dict  # noqa: E402
from src.filtering.registry import FieldSchemaRegistry  # noqa: E402
from src.filtering.store import FilterValueStore  # noqa: E402
from src.filtering.url_codec import InMemoryLocation  # noqa: E402


DEALS_FIELDS = [
    {"id": "search", "type": "text-search", "label": "Search Deals", "sort_order": 1},
    {
        "id": "status",
        "type": "multi-select",
        "label": "Status",
        "sort_order": 2,
        "options": [
            {"value": "pending", "label": "Pending", "count": 12},
            {"value": "active", "label": "Active", "count": 25},
            {"value": "completed", "label": "Completed", "count": 18},
            {"value": "cancelled", "label": "Cancelled", "count": 3},
        ],
    },
    {
        "id": "type",
        "type": "single-select",
        "label": "Deal Type",
        "sort_order": 3,
        "options": [
            {"value": "acquisition", "label": "Acquisition"},
            {"value": "merger", "label": "Merger"},
            {"value": "ipo", "label": "IPO"},
        ],
    },
    {
        "id": "valueRange",
        "type": "numeric-range",
        "label": "Deal Value Range",
        "column": "totalValue",
        "min": 0,
        "max": 1000000000,
        "category": "advanced",
        "sort_order": 4,
    },
    {
        "id": "dateRange",
        "type": "date-range",
        "label": "Date Range",
        "column": "createdAt",
        "category": "advanced",
        "sort_order": 5,
    },
    {
        "id": "forensicRating",
        "type": "rating",
        "label": "Minimum Forensic Rating",
        "max_rating": 5,
        "category": "advanced",
        "sort_order": 6,
    },
    {
        "id": "verified",
        "type": "boolean",
        "label": "Verified Counterparties Only",
        "category": "advanced",
        "sort_order": 7,
    },
]


@pytest.fixture
def deals_fields():
    """Field descriptors of a deals-like module."""
    return [field_from_dict(d) for d in DEALS_FIELDS]


@pytest.fixture
def registry(deals_fields):
    """Registry holding the deals module."""
    reg = FieldSchemaRegistry()
    reg.register_module("deals", deals_fields)
    return reg


@pytest.fixture
def location():
    """Empty in-memory location."""
    return InMemoryLocation()


@pytest.fixture
def store(deals_fields, location):
    """Filter store for the deals module, synced to an in-memory location."""
    return FilterValueStore(deals_fields, location=location, module="deals")


@pytest.fixture
def sample_deals():
    """Sample deal records."""
    return pd.DataFrame(
        [
            {
                "id": "1",
                "dealNumber": "BV-2024-001",
                "clientName": "Alpha Capital",
                "type": "acquisition",
                "status": "active",
                "totalValue": 250000000,
                "forensicRating": 4,
                "verified": True,
                "createdAt": "2024-01-15",
            },
            {
                "id": "2",
                "dealNumber": "BV-2024-002",
                "clientName": "Beta Holdings",
                "type": "ipo",
                "status": "pending",
                "totalValue": 180000000,
                "forensicRating": 5,
                "verified": False,
                "createdAt": "2024-02-01",
            },
            {
                "id": "3",
                "dealNumber": "BV-2024-003",
                "clientName": "Gamma Enterprises",
                "type": "merger",
                "status": "completed",
                "totalValue": 500000000,
                "forensicRating": 3,
                "verified": True,
                "createdAt": "2024-01-20",
            },
        ]
    )
