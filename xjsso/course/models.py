from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class CourseError(Exception):
    pass


def _str(data: Dict[str, Any], key: str, default: Optional[str] = None) -> str:
    value = data.get(key)
    if value is None:
        value = default
    if not isinstance(value, str):
        raise CourseError(f"Field {key!r} missing or not a string: {value!r}")
    return value


def _flag(data: Dict[str, Any], key: str) -> bool:
    # The course system encodes booleans as "0" and "1"
    return _str(data, key) == "1"


def _count(data: Dict[str, Any], key: str) -> int:
    value = _str(data, key)
    try:
        return int(value)
    except ValueError:
        raise CourseError(f"Field {key!r} is not a number: {value!r}")


def _object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise CourseError(f"Expected {what} to be an object, got {value!r}")
    return value


class CourseType(Enum):
    """
    Course categories, in the order the web interface lists them.
    """

    TJKC = "TJKC"    # 主修推荐课程
    FANKC = "FANKC"  # 方案内跨年级（其他）课程
    FAWKC = "FAWKC"  # 方案内跨专业（其他）课程
    XGXK = "XGXK"    # 基础通识类（核心/选修）
    CXKC = "CXKC"    # 重修课程
    TYKC = "TYKC"    # 体育课程
    FXKC = "FXKC"    # 辅修课程
    QXKC = "QXKC"    # 全校课表查询

    @staticmethod
    def from_string(string: str) -> "CourseType":
        try:
            return CourseType(string.upper())
        except ValueError:
            names = ", ".join(repr(t.value) for t in CourseType)
            raise ValueError(f"must be one of {names}")


class GenderLimit(Enum):
    NONE = "0"
    MALE = "1"
    FEMALE = "2"

    def __str__(self) -> str:
        return {
            GenderLimit.NONE: "不限",
            GenderLimit.MALE: "仅限男生",
            GenderLimit.FEMALE: "仅限女生",
        }[self]


@dataclass
class Batch:
    """
    A course selection round, e. g. the main selection of a term.
    """

    code: str
    name: str
    batch_type: str
    begin_time: str
    end_time: str
    school_term: str
    school_term_name: str
    tactic_code: str
    tactic_name: str  # e. g. 可选可退
    type_code: str
    type_name: str  # e. g. 正选
    week_range: str  # e. g. 1-16周

    @staticmethod
    def from_json(value: Any) -> "Batch":
        data = _object(value, "batch")
        return Batch(
            code=_str(data, "code"),
            name=_str(data, "name"),
            batch_type=_str(data, "batchType"),
            begin_time=_str(data, "beginTime"),
            end_time=_str(data, "endTime"),
            school_term=_str(data, "schoolTerm"),
            school_term_name=_str(data, "schoolTermName"),
            tactic_code=_str(data, "tacticCode"),
            tactic_name=_str(data, "tacticName"),
            type_code=_str(data, "typeCode"),
            type_name=_str(data, "typeName"),
            week_range=_str(data, "weekRange"),
        )


@dataclass
class TeachingClass:
    course_number: str
    teaching_class_id: str
    teacher_name: str
    teaching_place: str
    class_capacity: str
    number_of_selected: str
    limit_gender: GenderLimit
    is_choose: bool
    is_full: bool
    is_conflict: bool

    @staticmethod
    def from_json(value: Any) -> "TeachingClass":
        data = _object(value, "teaching class")
        try:
            limit_gender = GenderLimit(_str(data, "limitGender"))
        except ValueError:
            raise CourseError(f"Unknown gender limit {data.get('limitGender')!r}")
        return TeachingClass(
            course_number=_str(data, "courseNumber"),
            teaching_class_id=_str(data, "teachingClassID"),
            teacher_name=_str(data, "teacherName"),
            teaching_place=_str(data, "teachingPlace"),
            class_capacity=_str(data, "classCapacity"),
            number_of_selected=_str(data, "numberOfSelected"),
            limit_gender=limit_gender,
            is_choose=_flag(data, "isChoose"),
            is_full=_flag(data, "isFull"),
            is_conflict=_flag(data, "isConflict"),
        )


@dataclass
class CourseInfo:
    course_number: str
    course_name: str
    department_name: str
    course_nature_name: str  # 必修, 选修, ...
    selected: bool
    type_code: str
    type_name: str
    hours: str
    credit: str
    major_flag: str  # 主 or 辅
    tc_list: List[TeachingClass]

    @staticmethod
    def from_json(value: Any) -> "CourseInfo":
        data = _object(value, "course")
        tc_list = data.get("tcList")
        if not isinstance(tc_list, list):
            raise CourseError(f"Course has no teaching class list: {value!r}")
        return CourseInfo(
            course_number=_str(data, "courseNumber"),
            course_name=_str(data, "courseName", default=""),
            department_name=_str(data, "departmentName"),
            course_nature_name=_str(data, "courseNatureName"),
            selected=bool(data.get("selected", False)),
            type_code=_str(data, "type"),
            type_name=_str(data, "typeName"),
            hours=_str(data, "hours"),
            credit=_str(data, "credit"),
            major_flag=_str(data, "majorFlag"),
            tc_list=[TeachingClass.from_json(tc) for tc in tc_list],
        )


@dataclass
class CapacityInfo:
    number_of_male: int
    capacity_of_male: int
    number_of_female: int
    capacity_of_female: int
    number_of_selected: int
    class_capacity: int

    @staticmethod
    def from_json(value: Any) -> "CapacityInfo":
        data = _object(value, "capacity")
        return CapacityInfo(
            number_of_male=_count(data, "numberOfMale"),
            capacity_of_male=_count(data, "capacityOfMale"),
            number_of_female=_count(data, "numberOfFemale"),
            capacity_of_female=_count(data, "capacityOfFemale"),
            number_of_selected=_count(data, "numberOfSelected"),
            class_capacity=_count(data, "classCapacity"),
        )

    def __str__(self) -> str:
        return (
            f"男生：{self.number_of_male}/{self.capacity_of_male}，"
            f"女生：{self.number_of_female}/{self.capacity_of_female}，"
            f"总计：{self.number_of_selected}/{self.class_capacity}"
        )
