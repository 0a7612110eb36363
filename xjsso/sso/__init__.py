from .cas import CasLogin, login  # noqa: F401
from .crypto import encrypt_password, load_public_key, load_public_key_file, require_public_key  # noqa: F401
from .errors import (EncryptionError, LoginError, LoginPageError, MalformedRedirectError,  # noqa: F401
                     MfaDetectError, TooManyRedirectsError, TransportError, UnexpectedStatusError,
                     UnsupportedMfaError)
from .http import BROWSER_UA, create_client  # noqa: F401
from .mfa import MFA_DETECT_URL, detect_mfa  # noqa: F401
from .redirects import MAX_REDIRECTS, follow_redirects  # noqa: F401
from .services import SERVICES, AiPlatformService, CourseSelectionService, Service  # noqa: F401
from .services import service_from_string  # noqa: F401
from .session import AuthenticatedSession  # noqa: F401
from .tokens import LoginFormTokens, extract_tokens  # noqa: F401
