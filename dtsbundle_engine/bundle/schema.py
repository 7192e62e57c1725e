"""Bundle result - what a successful run wrote."""

from pydantic import BaseModel, Field
from typing import List, Optional


class BundleResult(BaseModel):
    """Summary of a completed bundle, in write order."""

    out: str
    name: str
    externs: List[str] = Field(default_factory=list)
    modules: List[str] = Field(default_factory=list, description="Module ids wrapped in declare module blocks")
    passthrough: List[str] = Field(default_factory=list, description="Declaration files copied verbatim")
    ambient: List[str] = Field(default_factory=list, description="Global scripts written unwrapped")
    main_alias: Optional[str] = Field(default=None, description="Module the namespace re-exports")
