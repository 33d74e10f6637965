from dataclasses import dataclass, field


@dataclass(frozen=True)
class AnalysisRequest:
    """One analysis invocation; built fresh each run, never cached."""

    system_prompt: str
    user_prompt: str
    model: str
    temperature: float

    def to_payload(self) -> dict[str, object]:
        return {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": self.user_prompt},
            ],
        }


@dataclass(frozen=True)
class Action:
    """A proposed compliance task; not persisted until the user confirms it."""

    title: str
    description: str | None = None
    priority: str | None = None
    department: str | None = None
    due_in_days: int | None = None
    owner_role: str | None = None
    confidence: float | None = None
    citation: str | None = None


@dataclass(frozen=True)
class BankContext:
    bank_id: str = ""
    bank_name: str = ""
    bank_type: str = ""
    applicable: bool | None = None
    applicable_reason: str = ""


@dataclass(frozen=True)
class AnalysisMeta:
    regulator: str | None = None
    circular_id: str | None = None
    reference_no: str | None = None
    date: str | None = None
    subject: str | None = None
    bank_context: BankContext = field(default_factory=BankContext)


@dataclass(frozen=True)
class AnalysisResult:
    """Structured model output; the only form tasks may be created from."""

    meta: AnalysisMeta
    summary: str = ""
    key_points: list[str] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    risks: list[str] = field(default_factory=list)

    @property
    def applicable(self) -> bool | None:
        return self.meta.bank_context.applicable


@dataclass(frozen=True)
class UnstructuredAnalysis:
    """Raw model text with a display-only, heuristic section split."""

    raw_text: str
    applicable: bool | None = None
    key_points: list[str] = field(default_factory=list)
    action_points: list[str] = field(default_factory=list)

    @property
    def summary_points(self) -> list[str]:
        return self.key_points[:3]


@dataclass(frozen=True)
class AnalysisOutcome:
    structured: AnalysisResult | None = None
    unstructured: UnstructuredAnalysis | None = None

    @property
    def is_structured(self) -> bool:
        return self.structured is not None

    @property
    def applicable(self) -> bool | None:
        if self.structured is not None:
            return self.structured.applicable
        if self.unstructured is not None:
            return self.unstructured.applicable
        return None

    @property
    def summary(self) -> str:
        if self.structured is not None:
            return self.structured.summary or "Analysis complete"
        if self.unstructured is not None:
            return self.unstructured.raw_text or "Analysis complete (unstructured)"
        return ""
