"""
Catalog loading - reads the drug description/code catalog from a JSON file.
"""
import json
from collections import Counter
from pathlib import Path
from typing import Optional, Protocol, Sequence, Tuple, Union

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .config import CATALOG_PATH
from .exceptions import CatalogUnavailable


class CatalogEntry(BaseModel):
    """One catalog record. Accepts both generic and PRK field names."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    description: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("description", "prk_description"),
    )
    code: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("code", "prk_code"),
    )


class SuggestionResult(BaseModel):
    description: str = Field(..., description="Human-readable drug/dosage label")
    code: str = Field(..., description="Catalog code of the matched entry")

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "SuggestionResult":
        return cls(description=entry.description, code=entry.code)


class CatalogSource(Protocol):
    """Anything that can produce the full catalog; path names the source in status and logs."""

    path: Union[str, Path]

    def load(self) -> Sequence[CatalogEntry]:
        ...


class JsonCatalogLoader:
    """
    Loads the catalog from a JSON array of {description, code} objects.

    Either the whole catalog loads or CatalogUnavailable is raised;
    there are no partial results.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else CATALOG_PATH

    def load(self) -> Tuple[CatalogEntry, ...]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise CatalogUnavailable(f"Catalog file not found: {self.path}") from e
        except UnicodeDecodeError as e:
            raise CatalogUnavailable(f"Catalog file is not valid UTF-8: {self.path}") from e
        except json.JSONDecodeError as e:
            raise CatalogUnavailable(f"Catalog file is not valid JSON: {self.path} ({e})") from e
        except OSError as e:
            raise CatalogUnavailable(f"Could not read catalog file {self.path}: {e}") from e

        if not isinstance(data, list):
            raise CatalogUnavailable(f"Catalog must be a JSON array: {self.path}")

        entries = []
        for index, record in enumerate(data):
            try:
                entries.append(CatalogEntry.model_validate(record))
            except ValidationError as e:
                raise CatalogUnavailable(
                    f"Invalid catalog record #{index} in {self.path}: {e.errors()[0]['msg']}"
                ) from e

        duplicates = [code for code, count in Counter(e.code for e in entries).items() if count > 1]
        if duplicates:
            logger.warning("Catalog {} contains duplicate codes: {}", self.path, ", ".join(sorted(duplicates)))

        logger.info("Loaded {} catalog entries from {}", len(entries), self.path)
        return tuple(entries)

    def __repr__(self) -> str:
        return f"JsonCatalogLoader({str(self.path)!r})"
