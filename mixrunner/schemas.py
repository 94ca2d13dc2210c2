"""Pydantic schemas for mixrunner results."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TaskEntry(BaseModel):
    """A task listed by `mix help`."""

    name: str = Field(..., description="Task name passed to mix")
    description: str = Field(default="", description="Informational comment text")


class SourceLocation(BaseModel):
    """A file:line reference found in mix output."""

    file: str
    line: int = Field(..., ge=1)
    column: int | None = Field(default=None, ge=1)


class TaskRunResult(BaseModel):
    """Result from running a mix task."""

    command_executed: list[str]
    work_dir: str
    exit_code: int
    output: str
    locations: list[SourceLocation] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class ProjectInfo(BaseModel):
    """Outcome of a project root lookup."""

    start_dir: str
    root: str | None = None
    prefer_umbrella: bool = True
