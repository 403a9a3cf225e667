from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import List, Optional

from .statuses import JudgementStatus, decode_status, is_terminal, ACCEPTED


class TestCaseInput(BaseModel):
    model_config = ConfigDict(frozen=True)
    __test__ = False

    input: str = ""
    expected_output: str = ""


class SubmissionRequest(BaseModel):
    """One test case worth of work, limits already converted to Judge0 units."""

    model_config = ConfigDict(frozen=True)

    source_code: str
    language_id: int
    stdin: str = ""
    expected_output: str = ""
    cpu_time_limit: float
    memory_limit: int


class Judge0SubmissionPayload(BaseModel):
    # text fields are base64 on the wire
    source_code: str
    language_id: int
    stdin: str
    expected_output: str
    cpu_time_limit: float
    memory_limit: int


class Judge0StatusInfo(BaseModel):
    id: int = Field(ge=1)
    description: str = ""


class Judge0RawResult(BaseModel):
    """Submission state as returned by Judge0 with ``base64_encoded=true``."""

    model_config = ConfigDict(extra="ignore")

    token: Optional[str] = None
    status: Judge0StatusInfo
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    message: Optional[str] = None
    exit_code: Optional[int] = None
    exit_signal: Optional[int] = None
    time: Optional[str] = None
    memory: Optional[int] = None


class JudgementResult(BaseModel):
    token: str
    status: Judge0StatusInfo
    stdout: str = ""
    stderr: str = ""
    compile_output: str = ""
    message: str = ""
    exit_code: Optional[int] = None
    exit_signal: Optional[int] = None
    time: Optional[float] = None
    memory: Optional[int] = None

    @property
    def status_id(self) -> int:
        return self.status.id

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status.id)

    @property
    def passed(self) -> bool:
        return self.status.id == ACCEPTED

    @computed_field  # type: ignore[misc]
    @property
    def verdict(self) -> JudgementStatus:
        return decode_status(self.status.id)


class LanguageInfo(BaseModel):
    id: int
    name: str


class JudgementSummary(BaseModel):
    passed: int
    total: int
    verdict: JudgementStatus
    max_time: Optional[float] = None
    max_memory: Optional[int] = None


class RunBatchRequest(BaseModel):
    source_code: str
    language: str
    test_cases: List[TestCaseInput]


class RunBatchResponse(BaseModel):
    results: List[JudgementResult]
    summary: JudgementSummary


class HealthResponse(BaseModel):
    healthy: bool
