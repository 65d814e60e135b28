import os
import subprocess
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent

# Cold start: audit signals pull in throttling and the error taxonomy before
# DRF has resolved its authentication classes.
BOOT_SCRIPT = """
import django
django.setup()
from rest_framework.settings import api_settings
print(api_settings.DEFAULT_AUTHENTICATION_CLASSES[0].__name__)
print(api_settings.EXCEPTION_HANDLER.__name__)
"""


def test_django_setup_from_cold_interpreter():
    env = {**os.environ, "DJANGO_SETTINGS_MODULE": "config.settings.test"}
    result = subprocess.run(  # noqa: S603
        [sys.executable, "-c", BOOT_SCRIPT],
        cwd=ROOT_DIR,
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
        check=False,
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout.split() == [
        "BearerJWTAuthentication",
        "envelope_exception_handler",
    ]
