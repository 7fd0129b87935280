"""Test configuration and fixtures for Echo tests."""

import pytest
import tempfile
import shutil
import os
from pathlib import Path
import yaml

import sys
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from echo_pkg.rendering import PartialRegistry
from echo_pkg.state import BuildState


def write(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def build_state():
    """An empty build state."""
    return BuildState(registry=PartialRegistry())


@pytest.fixture
def mock_site_dir(temp_dir):
    """Create a complete source tree with partials, views and data."""
    root = Path(temp_dir)
    src = root / 'src'
    partials = src / 'partials'
    views = src / 'views'

    write(partials / 'common' / 'footer.html', "<footer>{{ site.title }}</footer>\n")

    write(partials / 'blocks' / 'card.html', """---
title: Card
notes: Use **sparingly**.
spec: Cards are 320px wide.
---


<div class="card">{{ title }}</div>


""")
    write(partials / 'blocks' / 'nav' / 'header.html', """---
title: Header
---
<header>{{ title }}{% include "dropdown__item" %}</header>
""")
    write(partials / 'blocks' / 'nav' / 'dropdown' / 'item.html', """---
label: Item
---
<li>{{ label }}</li>
""")
    write(partials / 'blocks' / 'nav' / 'nav' / 'link.html', "<a>link</a>\n")
    write(partials / 'lib' / 'icon.html', "<i class=\"icon\"></i>\n")

    write(views / 'layouts' / 'default.html',
          "<html><body>{% body %}</body></html>")
    write(views / 'layouts' / 'module.html',
          "<div class=\"module\" id=\"{{ partial_id }}\">{% include partial_id %}</div>")
    write(views / 'layouts' / 'plain.html', "<main>{%body%}</main>")

    write(views / 'pages' / 'about.html', """---
title: About
---
<p>About us</p>{% include "footer" %}
""")
    write(views / 'pages' / '02-contact.html', """---
title: Contact
layout: plain
---
<p>{{ title }} {{ site.email }}</p>
""")
    write(views / 'guide' / 'components' / 'buttons.html', """---
title: Buttons
---
<h1>{{ title }}</h1>{% include "swatch" %}
""")
    write(views / 'guide' / 'echo' / 'swatch.html', "<span class=\"swatch\"></span>")
    write(views / 'index.html', """---
title: Home
---
<h1>{{ site.title }}</h1>
""")

    write(src / 'data' / 'site.yml', yaml.dump({'title': 'Echo Test', 'email': 'hi@example.com'}))

    return str(root)


@pytest.fixture
def site_settings(mock_site_dir):
    """Settings pointing every source pattern at the mock site."""
    src = os.path.join(mock_site_dir, 'src')
    views = os.path.join(src, 'views')
    return {
        'partials_dir': os.path.join(src, 'partials') + os.sep,
        'views_dir': views,
        'layouts': [os.path.join(views, 'layouts', '*')],
        'guide_includes': [os.path.join(views, 'guide', 'echo', '*')],
        'guide_pages': [
            os.path.join(views, 'guide', '**', '*'),
            '!' + os.path.join(views, 'guide', 'echo', '**'),
        ],
        'pages': [os.path.join(views, 'pages', '*')],
        'data': [os.path.join(src, 'data', '*')],
        'index': os.path.join(views, 'index.html'),
        'dist': os.path.join(mock_site_dir, 'dist'),
        'log_dir': None,
    }
