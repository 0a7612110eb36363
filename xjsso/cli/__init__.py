# isort: skip_file

# The order of imports matters because each command module registers itself
# with the parser from ".parser" and the import order affects the order in
# which they appear in the help. Because of this, isort is disabled for this
# file.

from . import command_login  # noqa: F401 imported but unused
from . import command_course  # noqa: F401 imported but unused
from .parser import PARSER, load_default_section  # noqa: F401 imported but unused
