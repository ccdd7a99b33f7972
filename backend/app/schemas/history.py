from pydantic import BaseModel, Field


class JobMetadata(BaseModel):
    filament_name: str
    filament_type: str | None = None
    filament_total: float | None = None
    filament_weight_total: float | None = None
    slicer: str | None = None
    estimated_time: float | None = None


class HistoryJob(BaseModel):
    filename: str
    filament_used: float = Field(allow_inf_nan=False)  # millimeters
    metadata: JobMetadata
    job_id: str | None = None
    status: str | None = None
    start_time: float | None = None
    end_time: float | None = None
    print_duration: float | None = None
    total_duration: float | None = None
    exists: bool | None = None


class HistoryResult(BaseModel):
    count: int
    jobs: list[HistoryJob]


class HistoryResponse(BaseModel):
    result: HistoryResult
