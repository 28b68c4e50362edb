from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class SetlistRules(BaseModel):
    title_max_length: int = Field(default=200, gt=0)
    description_max_length: int = Field(default=5000, gt=0)
    notes_max_length: int = Field(default=2000, gt=0)
    max_songs: int = Field(default=500, gt=0)


class StorageRules(BaseModel):
    migrations_dir: str = "migrations"
    busy_timeout_seconds: float = Field(default=5.0, gt=0)


class AuthRules(BaseModel):
    access_token_ttl_minutes: int = Field(default=60 * 24, gt=0)


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    log_level: str = "INFO"


class Rules(BaseModel):
    project: ProjectRules
    setlists: SetlistRules = Field(default_factory=SetlistRules)
    storage: StorageRules = Field(default_factory=StorageRules)
    auth: AuthRules = Field(default_factory=AuthRules)
    ops: OpsRules = Field(default_factory=OpsRules)
