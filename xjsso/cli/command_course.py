import argparse
from typing import List, Optional

from rich.markup import escape

from ..course import Batch, CourseError, CourseSession, CourseType, get_batch_list
from ..logging import log
from ..sso import AuthenticatedSession, CourseSelectionService
from .parser import SUBPARSERS, show_value_error

BATCH_PARSER = argparse.ArgumentParser(add_help=False)
BATCH_PARSER.add_argument(
    "--batch", "-b",
    type=str,
    metavar="CODE",
    help="code of the selection round to use, defaults to the first one listed"
)


def _find_batch(batches: List[Batch], code: Optional[str]) -> Batch:
    if not batches:
        raise CourseError("The course system lists no selection rounds")
    if code is None:
        return batches[0]
    for batch in batches:
        if batch.code == code:
            return batch
    raise CourseError(f"There is no selection round with code {code!r}")


async def _course_session(session: AuthenticatedSession) -> CourseSession:
    course_session = await CourseSession.from_session(session)
    log.status("[bold bright_cyan]", "Registered", f"{course_session.number} {course_session.name}")
    return course_session


async def run_whoami(session: AuthenticatedSession, args: argparse.Namespace) -> None:
    await _course_session(session)


async def run_batches(session: AuthenticatedSession, args: argparse.Namespace) -> None:
    for batch in await get_batch_list(session.client):
        log.print(
            f"[bold]{escape(batch.code)}[/] {escape(batch.name)} "
            f"({escape(batch.type_name)}, {escape(batch.tactic_name)}) "
            f"{escape(batch.begin_time)} - {escape(batch.end_time)}"
        )


async def run_search(session: AuthenticatedSession, args: argparse.Namespace) -> None:
    course_session = await _course_session(session)
    batch = _find_batch(await get_batch_list(session.client), args.batch)
    courses = await course_session.list_courses(batch, args.type, args.page, args.query)

    for course in courses:
        selected = "已选" if course.selected else "未选"
        log.print(f"[bold]{escape(course.course_number)}[/] - {escape(course.course_name)} - {selected}")
        for tc in course.tc_list:
            chosen = "已选" if tc.is_choose else "未选"
            log.print(
                f"  {escape(tc.teaching_class_id)} - {escape(tc.teacher_name)} - "
                f"{escape(tc.teaching_place)} - {tc.number_of_selected}/{tc.class_capacity} - {chosen}"
            )


async def run_add(session: AuthenticatedSession, args: argparse.Namespace) -> None:
    course_session = await _course_session(session)
    batch = _find_batch(await get_batch_list(session.client), args.batch)
    result = await course_session.add_volunteer(batch, args.class_id, args.type)
    log.status("[bold bright_green]", "Added", args.class_id, escape(str(result.get("msg", ""))))


async def run_drop(session: AuthenticatedSession, args: argparse.Namespace) -> None:
    course_session = await _course_session(session)
    batch = _find_batch(await get_batch_list(session.client), args.batch)
    result = await course_session.delete_volunteer(batch, args.class_id)
    log.status("[bold bright_magenta]", "Dropped", args.class_id, escape(str(result.get("msg", ""))))


async def run_capacity(session: AuthenticatedSession, args: argparse.Namespace) -> None:
    course_session = await _course_session(session)
    capacity = await course_session.get_capacity(args.class_id)
    log.status("[bold bright_cyan]", "Capacity", args.class_id, escape(str(capacity)))


def _add_type_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--type", "-t",
        type=show_value_error(CourseType.from_string),
        default=CourseType.TJKC,
        metavar="TYPE",
        help="course category, e. g. TJKC (recommended) or XGXK (general education)"
    )


SUBPARSER = SUBPARSERS.add_parser("whoami", help="show the student the course system sees")
SUBPARSER.set_defaults(command=run_whoami, command_service=CourseSelectionService.NAME)

SUBPARSER = SUBPARSERS.add_parser("batches", help="list course selection rounds")
SUBPARSER.set_defaults(command=run_batches, command_service=CourseSelectionService.NAME)

SUBPARSER = SUBPARSERS.add_parser("search", parents=[BATCH_PARSER], help="search courses")
_add_type_argument(SUBPARSER)
SUBPARSER.add_argument("--page", "-p", type=int, default=0, metavar="N", help="result page, starting at 0")
SUBPARSER.add_argument("query", type=str, nargs="?", default="", metavar="QUERY", help="search text")
SUBPARSER.set_defaults(command=run_search, command_service=CourseSelectionService.NAME)

SUBPARSER = SUBPARSERS.add_parser("add", parents=[BATCH_PARSER], help="select a teaching class")
_add_type_argument(SUBPARSER)
SUBPARSER.add_argument("class_id", type=str, metavar="CLASS", help="teaching class id")
SUBPARSER.set_defaults(command=run_add, command_service=CourseSelectionService.NAME)

SUBPARSER = SUBPARSERS.add_parser("drop", parents=[BATCH_PARSER], help="deselect a teaching class")
SUBPARSER.add_argument("class_id", type=str, metavar="CLASS", help="teaching class id")
SUBPARSER.set_defaults(command=run_drop, command_service=CourseSelectionService.NAME)

SUBPARSER = SUBPARSERS.add_parser("capacity", help="show how full a teaching class is")
SUBPARSER.add_argument("class_id", type=str, metavar="CLASS", help="teaching class id")
SUBPARSER.set_defaults(command=run_capacity, command_service=CourseSelectionService.NAME)
