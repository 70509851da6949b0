from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ManifestParseRequest(BaseModel):
    headers: Dict[str, str] = Field(default_factory=dict, description="Raw manifest headers, names as declared.")
    revision: Optional[str] = Field(default=None, description="Owning module revision for native library entries.")
    platform_profile: Optional[str] = Field(default=None, description="Match native code against this profile.")
    properties: Dict[str, str] = Field(default_factory=dict, description="Platform property overrides.")


class DeclarationModel(BaseModel):
    name: str
    directives: Dict[str, str] = Field(default_factory=dict)
    attributes: Dict[str, str] = Field(default_factory=dict)
    version_range: Optional[str] = None


class NativeClauseModel(BaseModel):
    library_files: List[str] = Field(default_factory=list)
    os_names: List[str] = Field(default_factory=list)
    processors: List[str] = Field(default_factory=list)
    os_versions: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    selection_filter: Optional[str] = None


class ManifestDescriptorResponse(BaseModel):
    manifest_version: str
    symbolic_name: Optional[str] = None
    bundle_version: Optional[str] = None
    exports: List[DeclarationModel] = Field(default_factory=list)
    imports: List[DeclarationModel] = Field(default_factory=list)
    dynamic_imports: List[DeclarationModel] = Field(default_factory=list)
    native_clauses: List[NativeClauseModel] = Field(default_factory=list)
    native_optional: bool = False
    libraries: Optional[List[str]] = None
