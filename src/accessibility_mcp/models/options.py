"""Per-engine audit options.

Every recognized option is enumerated here; unknown keys are dropped so that
nothing unvetted is forwarded to an engine. ``None`` means "use the adapter's
configured default".
"""

from pydantic import BaseModel, ConfigDict, Field

from accessibility_mcp.models.enums import BrowserType

DEFAULT_LIGHTHOUSE_CATEGORIES: tuple[str, ...] = ("accessibility",)


class RuleToggle(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool = True


class AxeAuditOptions(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    timeout: int | None = Field(None, gt=0)  # milliseconds
    browser: BrowserType | None = None
    tags: list[str] | None = None
    rules: dict[str, RuleToggle] | None = None

    def axe_run_options(self) -> dict | None:
        """Translate tag and rule filters into an axe ``run`` options object."""
        run_options: dict = {}
        if self.tags:
            run_options["runOnly"] = {"type": "tag", "values": list(self.tags)}
        if self.rules:
            run_options["rules"] = {
                rule_id: {"enabled": toggle.enabled} for rule_id, toggle in self.rules.items()
            }
        return run_options or None


class LighthouseAuditOptions(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    timeout: int | None = Field(None, gt=0)  # milliseconds
    categories: list[str] | None = None
    only_categories: list[str] | None = Field(None, alias="onlyCategories")
    skip_audits: list[str] | None = Field(None, alias="skipAudits")

    def resolved_categories(self) -> list[str]:
        """``onlyCategories`` wins over ``categories``; neither → accessibility."""
        return list(self.only_categories or self.categories or DEFAULT_LIGHTHOUSE_CATEGORIES)


class WaveAuditOptions(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    api_key: str | None = Field(None, alias="apiKey")
    api_url: str | None = Field(None, alias="apiUrl")
    timeout: int | None = Field(None, gt=0)  # milliseconds
