from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Config dataclasses for the FCR / PO document generator.

These are the typed form of config/fcr.yml after the loader
(fcrgen.config.loader) has validated it against the bundled JSON schema.
Every field has a default so the CLI can run without a config file.
"""

__all__ = [
    "TemplateVariant",
    "MaterialType",
    "DEFAULT_DELIMITERS",
    "DEFAULT_MATERIAL_DESCRIPTIONS",
    "DatabaseConfig",
    "FcrSettings",
    "PoSettings",
    "AppConfig",
]


class TemplateVariant(str, Enum):
    """First line of the FCR box template.

    - PORCELAIN: fixed literal "100% PORCELAIN TABLEWARE"
    - DESCRIPTION: the row's own Description value
    """
    PORCELAIN = "porcelain"
    DESCRIPTION = "description"


class MaterialType(str, Enum):
    """Material composition of an invoice (PO mode)."""
    MIXED = "mixed"
    RECYCLED = "recycled"
    NORMAL = "normal"


DEFAULT_DELIMITERS: tuple[str, ...] = (",", ";", "\t", "|")

DEFAULT_MATERIAL_DESCRIPTIONS: dict[MaterialType, str] = {
    MaterialType.MIXED: (
        "100% PORCELAIN TABLEWARE AND 80% PORCELAIN, 20% RECYCLED PRE-CONSUMER PORCELAIN"
    ),
    MaterialType.RECYCLED: "80% PORCELAIN, 20% RECYCLED PRE-CONSUMER PORCELAIN",
    MaterialType.NORMAL: "100% PORCELAIN TABLEWARE",
}


@dataclass(frozen=True)
class DatabaseConfig:
    """Project store connection fallback.

    Environment variables (DATABASE_URL / PGDSN / PG*) take precedence.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None


@dataclass(frozen=True)
class FcrSettings:
    """FCR box generation settings."""
    template_variant: TemplateVariant = TemplateVariant.PORCELAIN


@dataclass(frozen=True)
class PoSettings:
    """PO aggregation settings."""
    material_descriptions: dict[MaterialType, str] = field(
        default_factory=lambda: dict(DEFAULT_MATERIAL_DESCRIPTIONS)
    )

    def description_for(self, material_type: MaterialType | None) -> str:
        """Description string for a classification; unclassified reads as NORMAL."""
        key = material_type if material_type is not None else MaterialType.NORMAL
        return self.material_descriptions.get(key, DEFAULT_MATERIAL_DESCRIPTIONS[key])


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    fcr: FcrSettings = field(default_factory=FcrSettings)
    po: PoSettings = field(default_factory=PoSettings)
    delimiters: tuple[str, ...] = DEFAULT_DELIMITERS
    output_directory: str = "./output"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
