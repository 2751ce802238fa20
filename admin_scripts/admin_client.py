import requests
from beanie import PydanticObjectId
from pydantic import model_validator
from pydantic_settings import BaseSettings

from judgepool import schemas


class AdminClientSettings(BaseSettings):
    judgepool_api_key: str = ""
    hostname: str = "localhost"
    port: int = 8008
    api_v1_str: str = "/api/v1"
    base_url: str = f"https://{hostname}" if hostname != "localhost" else f"http://{hostname}:{port}"
    api_url: str = f"{base_url}{api_v1_str}"

    @model_validator(mode="after")
    def _set_base_url(self) -> "AdminClientSettings":
        hostname = self.hostname
        port = self.port
        self.base_url = f"https://{hostname}" if hostname != "localhost" else f"http://{hostname}:{port}"
        self.api_url = f"{self.base_url}{self.api_v1_str}"
        return self


class AdminClient:
    def __init__(self, settings: AdminClientSettings | None = None, session: requests.Session | None = None):
        settings = settings or AdminClientSettings()
        self.api_url = settings.api_url
        self.session = session or requests.Session()
        self.json_headers = {
            "accept": "application/json",
            "X-API-Key": settings.judgepool_api_key,
            "Content-Type": "application/json",
        }

    def get_groups(self) -> list[schemas.JudgingGroupInfo]:
        url = f"{self.api_url}/groups?limit=1000000"
        response = self.session.get(url, headers=self.json_headers)
        response.raise_for_status()
        return [schemas.JudgingGroupInfo(**group) for group in response.json()]

    def create_group(self, group: schemas.JudgingGroupCreate) -> schemas.JudgingGroupInfo:
        url = f"{self.api_url}/groups"
        response = self.session.post(url, data=group.model_dump_json(), headers=self.json_headers)
        response.raise_for_status()
        return schemas.JudgingGroupInfo(**response.json())

    def save_criteria(
        self, group_id: PydanticObjectId, criteria: list[schemas.CriterionSave]
    ) -> list[schemas.CriterionInfo]:
        url = f"{self.api_url}/groups/{group_id}/criteria"
        data = schemas.CriteriaSaveRequest(criteria=criteria)
        response = self.session.put(url, data=data.model_dump_json(), headers=self.json_headers)
        response.raise_for_status()
        return [schemas.CriterionInfo(**criterion) for criterion in response.json()]

    def add_submissions(
        self, group_id: PydanticObjectId, submissions: list[schemas.SubmissionRef]
    ) -> schemas.SubmissionsAddResponse:
        url = f"{self.api_url}/groups/{group_id}/submissions"
        data = schemas.SubmissionsAddRequest(submissions=submissions)
        response = self.session.post(url, data=data.model_dump_json(), headers=self.json_headers)
        response.raise_for_status()
        return schemas.SubmissionsAddResponse(**response.json())

    def get_export_rows(self, group_id: PydanticObjectId) -> list[schemas.ExportRow]:
        url = f"{self.api_url}/groups/{group_id}/export"
        response = self.session.get(url, headers=self.json_headers)
        response.raise_for_status()
        return [schemas.ExportRow(**row) for row in response.json()]

    def get_judges(self, group_id: PydanticObjectId) -> list[schemas.JudgeTrackingInfo]:
        url = f"{self.api_url}/groups/{group_id}/judges"
        response = self.session.get(url, headers=self.json_headers)
        response.raise_for_status()
        return [schemas.JudgeTrackingInfo(**judge) for judge in response.json()]
