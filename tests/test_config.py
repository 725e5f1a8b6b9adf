from pathlib import Path

from config import SHARED_TEMPLATES, Config, default_template_dir


def test_source_checkout_uses_local_templates():
    here = Path(__file__).resolve().parent.parent
    assert default_template_dir() == here / "templates"
    assert (default_template_dir() / "index.html").is_file()


def test_installed_copy_found_under_prefix(tmp_path):
    site_packages = tmp_path / "lib" / "site-packages"
    site_packages.mkdir(parents=True)
    installed = tmp_path / "venv" / SHARED_TEMPLATES
    installed.mkdir(parents=True)
    found = default_template_dir(site_packages, [tmp_path / "missing", tmp_path / "venv"])
    assert found == installed


def test_env_overrides():
    config = Config({
        'PORT': '9000',
        'ALLOW_ORIGIN': 'https://budget.example',
        'FLASK_DEBUG': 'true',
        'FINANCE_TEMPLATE_DIR': '/srv/shell',
    })
    assert config.api_base == 'http://localhost:9000/api'
    assert config.debug
    assert config.template_dir == Path('/srv/shell')
    assert config.flask_settings()['ALLOW_ORIGIN'] == 'https://budget.example'
