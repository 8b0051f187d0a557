# profile_engine/assessment/loader.py
# Loads and validates the YAML reference catalog.

import logging
import os
from functools import lru_cache
from typing import Dict, Any

import yaml
from pydantic import ValidationError

from .models import ReferenceCatalog

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
CATALOG_FILES = {
    "questions": "questions.yml",
    "archetypes": "archetypes.yml",
    "colors": "colors.yml",
    "components": "components.yml",
    "career_families": "career_families.yml",
}


class CatalogValidationError(ValueError):
    """Custom exception for catalog validation errors not covered by Pydantic."""
    pass


def _check_unique(ids, label: str) -> None:
    seen = set()
    for item_id in ids:
        if item_id in seen:
            raise CatalogValidationError(f"Duplicate {label} ID found: {item_id}")
        seen.add(item_id)


def load_catalog_data(data: Dict[str, Any]) -> ReferenceCatalog:
    """
    Validates the raw dictionary data against the ReferenceCatalog model
    and performs additional custom validations.
    """
    try:
        catalog = ReferenceCatalog.model_validate(data)
    except ValidationError as e:
        raise CatalogValidationError(f"Catalog does not match the expected schema: {e}") from e

    _check_unique((q.id for q in catalog.questions), "question")
    _check_unique((a.id for a in catalog.archetypes), "archetype")
    _check_unique((c.name for c in catalog.colors), "color")
    _check_unique((c.id for c in catalog.components), "component")
    _check_unique((f.id for f in catalog.career_families), "career family")

    if not catalog.archetypes:
        raise CatalogValidationError("Catalog must define at least one archetype")

    for question in catalog.questions:
        if question.context == "upgrade" and not question.targets:
            raise CatalogValidationError(f"Upgrade question '{question.id}' has no targets")

    logger.debug(
        f"Catalog {catalog.version} loaded: {len(catalog.questions)} questions, "
        f"{len(catalog.archetypes)} archetypes",
        extra={"category": "scoring"},
    )
    return catalog


def _read_yaml(file_path: str) -> Any:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogValidationError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise CatalogValidationError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise CatalogValidationError(f"YAML file is empty or invalid: {file_path}")
    return data


def load_catalog_from_file(file_path: str) -> ReferenceCatalog:
    """Loads a catalog kept in a single YAML document."""
    return load_catalog_data(_read_yaml(file_path))


def load_catalog_from_dir(data_dir: str = DEFAULT_DATA_DIR) -> ReferenceCatalog:
    """
    Loads a catalog split across one YAML file per section
    (see CATALOG_FILES). The questions file carries the catalog version.
    """
    questions_doc = _read_yaml(os.path.join(data_dir, CATALOG_FILES["questions"]))
    data: Dict[str, Any] = {
        "version": str(questions_doc.get("version", "")),
        "questions": questions_doc.get("questions", []),
    }
    for section in ("archetypes", "colors", "components", "career_families"):
        doc = _read_yaml(os.path.join(data_dir, CATALOG_FILES[section]))
        data[section] = doc.get(section, [])
    return load_catalog_data(data)


@lru_cache(maxsize=1)
def load_default_catalog() -> ReferenceCatalog:
    """The catalog shipped with the package, loaded once."""
    return load_catalog_from_dir(DEFAULT_DATA_DIR)
