import json
from typing import Any, Dict, List

import httpx

from ..logging import log
from ..sso import AuthenticatedSession, LoginError
from ..sso.http import request
from .models import Batch, CapacityInfo, CourseError, CourseInfo, CourseType

BASE_URL = "https://xkfw.xjtu.edu.cn/xsxkapp/sys/xsxkapp"
PAGE_SIZE = 10


def _compact(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


async def _get_json(client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
    try:
        response = await request(client, method, url, **kwargs)
    except LoginError as e:
        raise CourseError(str(e)) from e

    if response.status_code != 200:
        raise CourseError(f"{method} {url} returned status code {response.status_code}")
    try:
        body = response.json()
    except ValueError:
        raise CourseError(f"{method} {url} did not return JSON")
    if not isinstance(body, dict):
        raise CourseError(f"{method} {url} returned unexpected JSON: {body!r}")
    return body


async def get_batch_list(client: httpx.AsyncClient) -> List[Batch]:
    """
    List the course selection rounds currently known to the course system.
    """

    body = await _get_json(client, "GET", f"{BASE_URL}/elective/batch.do")
    batches = body.get("dataList") or []
    if not isinstance(batches, list):
        raise CourseError(f"Unexpected batch list: {batches!r}")
    return [Batch.from_json(batch) for batch in batches]


class CourseSession:
    """
    The course system's view of a logged in student.

    Every request besides the batch list needs the per-session token the
    course system hands out on registration.
    """

    def __init__(self, client: httpx.AsyncClient, number: str, name: str, token: str) -> None:
        self.client = client
        self.number = number  # 学号
        self.name = name
        self._token = token

    @staticmethod
    async def from_session(session: AuthenticatedSession) -> "CourseSession":
        body = await _get_json(session.client, "GET", f"{BASE_URL}/student/register.do")
        data = body.get("data")
        if not isinstance(data, dict):
            raise CourseError(f"Unexpected registration response: {body!r}")

        fields = {}
        for key in ["number", "name", "token"]:
            value = data.get(key)
            if not isinstance(value, str):
                raise CourseError(f"Registration response lacks {key!r}")
            fields[key] = value

        log.explain(f"Registered as {fields['number']} ({fields['name']})")
        return CourseSession(session.client, fields["number"], fields["name"], fields["token"])

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Requested-With": "XMLHttpRequest",
            "token": self._token,
        }

    async def list_courses(
            self,
            batch: Batch,
            course_type: CourseType,
            page: int = 0,
            query: str = "",
    ) -> List[CourseInfo]:
        """
        Search the courses of one category. Pages start at 0.
        """

        setting = {
            "data": {
                "studentCode": self.number,
                "campus": "1",
                "electiveBatchCode": batch.code,
                "isMajor": "1",
                "teachingClassType": course_type.value,
                "checkConflict": "2",
                "checkCapacity": "2",
                "queryContent": query,
            },
            "pageSize": str(PAGE_SIZE),
            "pageNumber": str(page),
            "order": "",
        }
        body = await _get_json(
            self.client, "POST", f"{BASE_URL}/elective/programCourse.do",
            data={"querySetting": _compact(setting)},
            headers=self._headers(),
        )
        courses = body.get("dataList") or []
        if not isinstance(courses, list):
            raise CourseError(f"Unexpected course list: {courses!r}")
        return [CourseInfo.from_json(course) for course in courses]

    async def add_volunteer(self, batch: Batch, class_id: str, course_type: CourseType) -> Dict[str, Any]:
        param = {
            "data": {
                "operationType": "1",
                "studentCode": self.number,
                "electiveBatchCode": batch.code,
                "teachingClassId": class_id,
                "isMajor": "1",
                "campus": "1",
                "teachingClassType": course_type.value,
            }
        }
        body = await _get_json(
            self.client, "POST", f"{BASE_URL}/elective/volunteer.do",
            data={"addParam": _compact(param)},
            headers=self._headers(),
        )
        log.explain(f"Add volunteer {class_id}: {body.get('msg')!r}")
        return body

    async def delete_volunteer(self, batch: Batch, class_id: str) -> Dict[str, Any]:
        param = {
            "data": {
                "operationType": "2",
                "studentCode": self.number,
                "electiveBatchCode": batch.code,
                "teachingClassId": class_id,
                "isMajor": "1",
            }
        }
        body = await _get_json(
            self.client, "GET", f"{BASE_URL}/elective/deleteVolunteer.do",
            params={"deleteParam": _compact(param)},
            headers=self._headers(),
        )
        log.explain(f"Delete volunteer {class_id}: {body.get('msg')!r}")
        return body

    async def get_capacity(self, class_id: str) -> CapacityInfo:
        body = await _get_json(
            self.client, "GET", f"{BASE_URL}/elective/teachingclass/capacity.do",
            params={"teachingClassId": class_id, "capacitySuffix": ""},
            headers=self._headers(),
        )
        return CapacityInfo.from_json(body.get("data"))
