"""
Pydantic schemas for contact records and run results.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Column headers of the contact export, in their canonical order.
CONTACT_HEADERS: tuple[str, ...] = (
    "No.",
    "ID",
    "Repeater",
    "Name",
    "City",
    "Province",
    "Country",
    "Remark",
    "Type",
    "Alert Call",
)

# Largest value of an unsigned 32-bit integer.
U32_MAX = 4_294_967_295

# Optional plus sign, then ASCII digits only.
UNSIGNED_PATTERN = re.compile(r"\+?[0-9]+")


class Contact(BaseModel):
    """A single contact row.

    Field aliases are the CSV column headers, so a row dict read with
    ``csv.DictReader`` validates directly into a Contact.
    """

    model_config = ConfigDict(populate_by_name=True)

    no: int = Field(..., alias="No.", ge=0, le=U32_MAX, description="Sequence number")
    id: int = Field(..., alias="ID", ge=0, le=U32_MAX, description="Numeric contact ID")
    repeater: str = Field(default="", alias="Repeater")
    name: str = Field(default="", alias="Name")
    city: str = Field(default="", alias="City")
    province: str = Field(default="", alias="Province")
    country: str = Field(default="", alias="Country")
    remark: str = Field(default="", alias="Remark")
    call_type: str = Field(default="", alias="Type")
    alert_call: str = Field(default="", alias="Alert Call")

    @field_validator("no", "id", mode="before")
    @classmethod
    def validate_unsigned(cls, v: object) -> object:
        """Reject decimals, separators and whitespace in numeric cells."""
        if isinstance(v, str) and not UNSIGNED_PATTERN.fullmatch(v):
            raise ValueError("must be an unsigned integer")
        return v

    def to_row(self, headers: list[str] | tuple[str, ...] = CONTACT_HEADERS) -> list[str]:
        """Serialize to CSV cell values, ordered as ``headers``."""
        values = self.model_dump(by_alias=True)
        return [str(values[h]) for h in headers]


class PartitionedContacts(BaseModel):
    """Filtered contacts split by priority, each group in input order."""

    priority: list[Contact] = Field(default_factory=list)
    other: list[Contact] = Field(default_factory=list)
    records_read: int = 0

    @property
    def total(self) -> int:
        return len(self.priority) + len(self.other)


class FilterSummary(BaseModel):
    """Outcome of one filtering run."""

    filter_countries: int = Field(..., ge=0, description="Distinct countries in the filter set")
    records_read: int = Field(..., ge=0, description="Data rows read from the input CSV")
    priority_country: str | None = Field(default=None, description="Country placed first, if any")
    priority_count: int = Field(default=0, ge=0, description="Filtered rows from the priority country")
    other_count: int = Field(default=0, ge=0, description="Filtered rows from other countries")
    total_filtered: int = Field(..., ge=0, description="Filtered rows before truncation")
    limit: int | None = Field(default=None, ge=0, description="Row limit applied, if any")
    truncated: bool = Field(default=False, description="Whether the limit dropped rows")
    records_written: int = Field(..., ge=0, description="Data rows written to the output CSV")
    output_path: str
