from automate.schemas.common import CamelModel


class SafetyRating(CamelModel):
    overall_rating: str = "Not Rated"
    frontal_crash_rating: str = "Not Rated"
    side_crash_rating: str = "Not Rated"
    rollover_rating: str = "Not Rated"
    complaints: int = 0
    recalls: int = 0


class Recall(CamelModel):
    campaign_number: str = ""
    report_received_date: str = ""
    component: str = ""
    summary: str = ""
    consequence: str = ""
    remedy: str = ""
    manufacturer: str = ""


class Complaint(CamelModel):
    odi_number: str = ""
    date_of_incident: str = ""
    component: str = ""
    summary: str = ""
    crash: bool = False
    fire: bool = False
    number_of_injuries: int = 0
    number_of_deaths: int = 0


class SafetyData(CamelModel):
    make: str
    model: str
    year: int
    safety: SafetyRating | None = None
    recalls: list[Recall] = []
    complaints: list[Complaint] = []
    recall_count: int = 0
    complaint_count: int = 0
