"""
Log into XJTU's CAS single sign-on and talk to the services behind it.

    public_key = load_public_key_file(Path("xjtu_cas.pem"))
    session = await xjsso.login("course-selection", netid, password, public_key=public_key)
    async with session:
        course_session = await CourseSession.from_session(session)
"""

from .sso import SERVICES, AuthenticatedSession, CasLogin, LoginError, Service, login  # noqa: F401
from .sso import load_public_key_file, service_from_string  # noqa: F401
from .version import VERSION

__version__ = VERSION
