"""Initial pool data loading and validation."""
from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from address_pool.domain.address import PostalAddress
from address_pool.domain.shared.errors import SeedDataError

from .contracts import SkippedEntry

logger = logging.getLogger(__name__)

DEFAULT_DATA_PACKAGE = "address_pool.data"
DEFAULT_DATA_FILE = "addresses.json"


class PostalAddressPayload(BaseModel):
    """One entry of the initial-data file."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    address: str
    city: str
    state: str
    zip: str

    @field_validator("zip", mode="before")
    @classmethod
    def _zip_as_text(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("address", "city", "state", "zip")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("must not be empty")
        return value

    def to_domain(self) -> PostalAddress:
        return PostalAddress(address=self.address, city=self.city, state=self.state, zip=self.zip)


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "entry"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


def validate_entries(
    entries: Iterable[PostalAddress | Mapping[str, Any]],
) -> Tuple[List[PostalAddress], Tuple[SkippedEntry, ...]]:
    """Split raw entries into valid postal addresses and skipped entries."""

    valid: List[PostalAddress] = []
    skipped: List[SkippedEntry] = []
    for index, entry in enumerate(entries):
        if isinstance(entry, PostalAddress):
            entry = entry.as_dict()
        if not isinstance(entry, Mapping):
            skipped.append(SkippedEntry(index=index, reason="entry is not an object"))
            continue
        try:
            payload = PostalAddressPayload.model_validate(dict(entry))
        except ValidationError as exc:
            skipped.append(SkippedEntry(index=index, reason=_describe(exc)))
            continue
        valid.append(payload.to_domain())
    for item in skipped:
        logger.warning("pool.seed_entry_skipped", extra={"index": item.index, "reason": item.reason})
    return valid, tuple(skipped)


def _read_text(path: str | Path | None) -> Tuple[str, str]:
    if path is None:
        source = resources.files(DEFAULT_DATA_PACKAGE).joinpath(DEFAULT_DATA_FILE)
        return source.read_text(encoding="utf-8"), f"{DEFAULT_DATA_PACKAGE}/{DEFAULT_DATA_FILE}"
    file_path = Path(path)
    return file_path.read_text(encoding="utf-8"), str(file_path)


def load_initial_data(path: str | Path | None = None) -> List[Any]:
    """Read the JSON list of postal payloads used to seed the pool.

    ``path`` defaults to the packaged ``addresses.json``. Individual bad
    entries are left for :func:`validate_entries` to skip; an unreadable file
    or a document that is not a list raises :class:`SeedDataError`.
    """

    try:
        text, origin = _read_text(path)
    except OSError as exc:
        raise SeedDataError(
            "Initial address data could not be read.", details={"path": str(path), "error": str(exc)}
        ) from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SeedDataError(
            "Initial address data is not valid JSON.", details={"path": origin, "error": str(exc)}
        ) from exc
    if not isinstance(document, list):
        raise SeedDataError(
            "Initial address data must be a list of address objects.",
            details={"path": origin, "type": type(document).__name__},
        )
    logger.debug("pool.seed_file_loaded", extra={"path": origin, "entries": len(document)})
    return document


__all__ = ["PostalAddressPayload", "load_initial_data", "validate_entries"]
