import os

# Rich consoles are created at import time and size themselves from COLUMNS;
# pin a wide terminal so CLI table output is not truncated under the test runner.
os.environ.setdefault("COLUMNS", "200")

from tests.fixtures import *  # noqa: E402,F401,F403
