from __future__ import annotations

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # wire format is the persisted VTO JSON shape (camelCase keys)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Rock(CamelModel):
    text: str = ""
    owner: str = ""


class Issue(CamelModel):
    text: str = ""
    status: str = ""


class VtoDocument(CamelModel):
    company_name: str = ""
    vto_date: str = ""
    quarter: str = ""
    the_bar: str = ""
    purpose: str = ""
    niche: str = ""
    ten_year_date: str = ""
    ten_year_target: str = ""
    three_year_date: str = ""
    three_year_revenue: str = ""
    three_year_profit: str = ""
    proven_process: str = ""
    guarantee: str = ""
    one_year_date: str = ""
    one_year_revenue: str = ""
    one_year_profit: str = ""
    one_year_theme: str = ""
    rocks_date: str = ""
    rocks_revenue: str = ""
    rocks_profit: str = ""
    rocks_theme: str = ""
    core_values: List[str] = Field(default_factory=list)
    three_year_bullets: List[str] = Field(default_factory=list)
    target_market: List[str] = Field(default_factory=list)
    three_uniques: List[str] = Field(default_factory=list)
    one_year_goals: List[str] = Field(default_factory=list)
    rocks: List[Rock] = Field(default_factory=list)
    issues: List[Issue] = Field(default_factory=list)


class ExportText(VtoDocument):
    filename: str
    pdf_filename: str
    json_filename: str


class ReportSummary(BaseModel):
    field_count: int
    warnings: int = 0
    deterministic: bool = True


class ReportItem(BaseModel):
    field: Optional[str] = None
    index: Optional[int] = None
    issue: str
    value: Optional[str] = None
    action: str


class NormalizationReport(BaseModel):
    summary: ReportSummary
    normalizations: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[ReportItem] = Field(default_factory=list)


class NormalizeResponse(BaseModel):
    document: VtoDocument
    report: NormalizationReport


class HealthResponse(BaseModel):
    ok: bool = True
