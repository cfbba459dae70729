"""
Story catalog.

The built-in catalog is the fixed deck of 20 stories every game is dealt
from. A YAML file with the same fields can replace it:

    stories:
      - id: 1
        description: User Login & Registration
        price: 150
        analysis_effort: 8
        dev_effort: 18
        test_effort: 10
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from kanban.lib.validate import ValidationError, validate
from kanban.pm.models import Story

logger = logging.getLogger(__name__)


# Catalog order is reveal order.
DEFAULT_CATALOG = [
    {"id": 1, "description": "User Login & Registration", "price": 150, "analysis_effort": 8, "dev_effort": 18, "test_effort": 10},
    {"id": 2, "description": "Product Catalog Search", "price": 120, "analysis_effort": 6, "dev_effort": 15, "test_effort": 8},
    {"id": 3, "description": "Shopping Cart Functionality", "price": 180, "analysis_effort": 10, "dev_effort": 20, "test_effort": 12},
    {"id": 4, "description": "Payment Gateway Integration", "price": 200, "analysis_effort": 12, "dev_effort": 25, "test_effort": 15},
    {"id": 5, "description": "User Profile Management", "price": 100, "analysis_effort": 5, "dev_effort": 12, "test_effort": 7},
    {"id": 6, "description": "Order History View", "price": 90, "analysis_effort": 4, "dev_effort": 10, "test_effort": 6},
    {"id": 7, "description": "Admin Product Management", "price": 160, "analysis_effort": 9, "dev_effort": 19, "test_effort": 11},
    {"id": 8, "description": "Forgot Password Flow", "price": 70, "analysis_effort": 3, "dev_effort": 8, "test_effort": 5},
    {"id": 9, "description": "Email Notification System", "price": 110, "analysis_effort": 6, "dev_effort": 14, "test_effort": 9},
    {"id": 10, "description": "Customer Support Chatbot", "price": 170, "analysis_effort": 11, "dev_effort": 22, "test_effort": 13},
    {"id": 11, "description": "Product Reviews & Ratings", "price": 130, "analysis_effort": 7, "dev_effort": 16, "test_effort": 9},
    {"id": 12, "description": "Wishlist Feature", "price": 80, "analysis_effort": 4, "dev_effort": 9, "test_effort": 5},
    {"id": 13, "description": "API for Mobile App", "price": 190, "analysis_effort": 10, "dev_effort": 23, "test_effort": 14},
    {"id": 14, "description": "Search Engine Optimization (SEO)", "price": 60, "analysis_effort": 3, "dev_effort": 7, "test_effort": 4},
    {"id": 15, "description": "Data Analytics Dashboard", "price": 220, "analysis_effort": 15, "dev_effort": 28, "test_effort": 18},
    {"id": 16, "description": "GDPR Compliance", "price": 140, "analysis_effort": 8, "dev_effort": 17, "test_effort": 10},
    {"id": 17, "description": "Multi-language Support", "price": 160, "analysis_effort": 9, "dev_effort": 20, "test_effort": 11},
    {"id": 18, "description": "Guest Checkout", "price": 95, "analysis_effort": 5, "dev_effort": 11, "test_effort": 6},
    {"id": 19, "description": "Referral Program", "price": 125, "analysis_effort": 7, "dev_effort": 16, "test_effort": 9},
    {"id": 20, "description": "Server Performance Optimization", "price": 175, "analysis_effort": 10, "dev_effort": 24, "test_effort": 15},
]


def load_catalog(path: Optional[Path] = None) -> list[dict]:
    """Load a story catalog.

    If path is None, returns a copy of DEFAULT_CATALOG.

    Raises:
        FileNotFoundError: If path doesn't exist
        ValidationError: If the file is not valid YAML, doesn't match the
            catalog schema or repeats a story id
    """
    if path is None:
        return [dict(entry) for entry in DEFAULT_CATALOG]

    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValidationError("catalog", f"Invalid YAML in {path}: {e}") from None

    validate(data, "catalog")

    seen: set[int] = set()
    for i, entry in enumerate(data["stories"]):
        if entry["id"] in seen:
            raise ValidationError("catalog", f"Duplicate story id {entry['id']}", f"stories.{i}.id")
        seen.add(entry["id"])

    logger.info(f"Loaded {len(data['stories'])} stories from {path}")
    return data["stories"]


def build_stories(entries: list[dict]) -> list[Story]:
    """Create hidden Story objects from catalog entries, in catalog order."""
    return [
        Story(
            id=entry["id"],
            description=entry["description"],
            price=entry["price"],
            analysis_effort=entry["analysis_effort"],
            dev_effort=entry["dev_effort"],
            test_effort=entry["test_effort"],
        )
        for entry in entries
    ]
