from pydantic import BaseModel, Field


class ValidatorConfig(BaseModel):
    """Settings for one validation run"""

    docs_glob: str = "**/devdoc/*_requirements.md"
    source_extensions: list[str] = Field(default_factory=lambda: [".c", ".h", ".cpp", ".hpp"])
    test_suffixes: list[str] = Field(default_factory=lambda: ["_ut", "_int"])
    exclude_dirs: list[str] = Field(default_factory=lambda: [".git", "build", "cmake", "deps"])
    jobs: int = Field(default=1, ge=1)
    check_orphans: bool = True
    check_placement: bool = True
