from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class AddressRecord:
    street: str
    number: str
    city: str
    state: str
    postal_code: str
    country: str
    formatted: str
    county: str = ""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "street": self.street,
            "number": self.number,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
        }
        # county is optional on the wire
        if self.county:
            out["county"] = self.county
        out["country"] = self.country
        out["formatted"] = self.formatted
        return out

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AddressRecord:
        def s(key: str) -> str:
            v = d.get(key)
            return "" if v is None else str(v)

        return cls(
            street=s("street"),
            number=s("number"),
            city=s("city"),
            state=s("state"),
            postal_code=s("postal_code"),
            country=s("country"),
            formatted=s("formatted"),
            county=s("county"),
        )


@dataclass(frozen=True)
class NormalizedInput:
    original: str
    normalized: str
    changes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "original": self.original,
            "normalized": self.normalized,
            "changes": list(self.changes),
        }


class ResultKind(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    ERROR = "error"


PROVIDER_NONE = "none"


@dataclass(frozen=True)
class ProviderResult:
    """
    Outcome of one provider call (or of the whole chain when provider == "none").

    SUCCESS always carries a record; EMPTY and ERROR never do.
    """

    kind: ResultKind
    provider: str
    record: AddressRecord | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.kind is ResultKind.SUCCESS

    @classmethod
    def ok(cls, provider: str, record: AddressRecord) -> ProviderResult:
        return cls(kind=ResultKind.SUCCESS, provider=provider, record=record)

    @classmethod
    def empty(cls, provider: str) -> ProviderResult:
        return cls(kind=ResultKind.EMPTY, provider=provider, error="no results found")

    @classmethod
    def failed(cls, provider: str, error: str) -> ProviderResult:
        return cls(kind=ResultKind.ERROR, provider=provider, error=error)


STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class ValidateResponse:
    status: str
    data: AddressRecord | None = None
    corrections: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_SUCCESS

    @classmethod
    def success(cls, data: AddressRecord, corrections: list[str] | None = None) -> ValidateResponse:
        return cls(status=STATUS_SUCCESS, data=data, corrections=list(corrections or []))

    @classmethod
    def failure(cls, error: str) -> ValidateResponse:
        return cls(status=STATUS_ERROR, error=error)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"status": self.status}
        if self.data is not None:
            out["data"] = self.data.to_dict()
        if self.corrections:
            out["corrections"] = list(self.corrections)
        if self.error:
            out["error"] = self.error
        return out

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ValidateResponse:
        """
        Inverse of to_dict(). Raises ValueError / TypeError on a payload that
        is not a response, so callers can treat it as a cache miss.
        """
        if not isinstance(d, dict):
            raise TypeError(f"expected dict, got {type(d).__name__}")

        status = d.get("status")
        if status not in (STATUS_SUCCESS, STATUS_ERROR):
            raise ValueError(f"invalid status: {status!r}")

        data = d.get("data")
        if data is not None and not isinstance(data, dict):
            raise TypeError("data must be an object")

        corrections = d.get("corrections") or []
        if not isinstance(corrections, list):
            raise TypeError("corrections must be a list")

        record = AddressRecord.from_dict(data) if data is not None else None
        if status == STATUS_SUCCESS and record is None:
            raise ValueError("success response without data")

        return cls(
            status=status,
            data=record,
            corrections=[str(c) for c in corrections],
            error=d.get("error") or None,
        )
