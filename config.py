import os
import site
import sys
from pathlib import Path

from dotenv import load_dotenv

# .env is optional; real environment variables win.
load_dotenv()

DEFAULT_STATE_FILE = Path.home() / ".finance-tracker" / "state.json"
# Where a wheel install puts templates/ (see data-files in pyproject.toml).
SHARED_TEMPLATES = Path("share") / "finance-tracker" / "templates"


def default_template_dir(here=None, prefixes=None) -> Path:
    """templates/ beside the modules in a source checkout, else the installed copy."""
    here = Path(here or Path(__file__).resolve().parent)
    local = here / "templates"
    if local.is_dir():
        return local
    if prefixes is None:
        prefixes = [sys.prefix, site.getuserbase()]
    for prefix in prefixes:
        candidate = Path(prefix) / SHARED_TEMPLATES
        if candidate.is_dir():
            return candidate
    return local


class Config:
    """Settings read from the environment (or a plain mapping in tests)."""

    def __init__(self, environ=None):
        env = os.environ if environ is None else environ
        self.database_url = env.get('DATABASE_URL') or 'sqlite:///finance_tracker.db'
        self.port = int(env.get('PORT') or 8080)
        self.allow_origin = env.get('ALLOW_ORIGIN') or '*'
        self.debug = str(env.get('FLASK_DEBUG', '')).lower() in ('1', 'true', 'yes', 'on')
        self.api_base = (env.get('API_BASE') or f'http://localhost:{self.port}/api').rstrip('/')
        self.state_file = Path(env.get('FINANCE_STATE_FILE') or DEFAULT_STATE_FILE)
        self.currency_symbol = env.get('CURRENCY_SYMBOL', '$')
        self.template_dir = Path(env.get('FINANCE_TEMPLATE_DIR') or default_template_dir())

    def flask_settings(self) -> dict:
        return {
            'SQLALCHEMY_DATABASE_URI': self.database_url,
            'ALLOW_ORIGIN': self.allow_origin,
            'CURRENCY_SYMBOL': self.currency_symbol,
            'TEMPLATES_AUTO_RELOAD': self.debug,
        }
