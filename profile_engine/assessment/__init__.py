from .engine import ProfileEngine, compute_profile
from .loader import CatalogValidationError, load_default_catalog, load_catalog_from_dir, load_catalog_from_file
from .models import Question, ArchetypeDefinition, ReferenceCatalog, SessionSnapshot

__all__ = [
    "ProfileEngine",
    "compute_profile",
    "CatalogValidationError",
    "load_default_catalog",
    "load_catalog_from_dir",
    "load_catalog_from_file",
    "Question",
    "ArchetypeDefinition",
    "ReferenceCatalog",
    "SessionSnapshot",
]
