#!/usr/bin/env python3
"""
Command-line interface for Echo - pattern library and site assembler.
"""

import os
import sys
import argparse
import traceback
from typing import Any, Dict, List, Optional

from . import __version__
from .core import Echo
from .settings import EchoSettings

STARTER_FILES = {
    'src/views/layouts/default.html': """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ title or name }}{% if site %} | {{ site.title }}{% endif %}</title>
</head>
<body>
{% body %}
</body>
</html>
""",
    'src/views/layouts/module.html': """<section class="echo-module" id="{{ partial_id }}">
    <h1>{{ name }}</h1>
    {% include partial_id %}
    {% if notes %}<aside class="echo-notes">{{ notes }}</aside>{% endif %}
</section>
""",
    'src/partials/blocks/card.html': """---
title: Sample card
notes: |
  A card shows a **title** and a short description.
---
<div class="card">
    <h2>{{ title }}</h2>
    <p>{{ description | default('Cards group related content.') }}</p>
</div>
""",
    'src/partials/common/footer.html': """<footer>{{ site.title }}</footer>
""",
    'src/views/pages/about.html': """---
title: About
---
<h1>{{ title }}</h1>
<p>This site was assembled with Echo.</p>
{% include "footer" %}
""",
    'src/views/index.html': """---
title: Home
---
<h1>{{ site.title }}</h1>
<ul>
{% for id, page in pages.pages.items.items() %}
    <li><a href="{{ page.slug }}.html">{{ page.data.title or page.name }}</a></li>
{% endfor %}
</ul>
{% include "footer" %}
""",
    'src/data/site.yml': """title: My Pattern Library
""",
}


def create_starter_structure() -> None:
    """Create starter layouts, partials, pages and data without overwriting anything."""
    current_dir = os.getcwd()

    for relative_path, content in STARTER_FILES.items():
        file_path = os.path.join(current_dir, *relative_path.split('/'))
        if os.path.exists(file_path):
            print(f"File already exists: {relative_path}")
            continue
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(content)
        print(f"Created: {relative_path}")

    print("\nStarter structure created successfully!")
    print("\nNext steps:")
    print("1. Edit the configuration file (echo.yml)")
    print("2. Add partials to 'src/partials/' and pages to 'src/views/pages/'")
    print("3. Run 'echo-build' to assemble your site")


def normalize_error(error: BaseException) -> Dict[str, Any]:
    """Combine an exception's fields with the default error shape."""
    normalized = {
        'name': 'Error',
        'reason': '',
        'message': 'An error occurred',
    }
    if hasattr(error, 'to_dict'):
        normalized.update(error.to_dict())
    else:
        normalized['name'] = type(error).__name__
        if str(error):
            normalized['message'] = str(error)
    return normalized


def handle_error(error: BaseException) -> Dict[str, Any]:
    """Report a fatal build error to stderr."""
    details = normalize_error(error)
    stack = ''.join(traceback.format_exception(type(error), error, error.__traceback__))
    print(f"ECHO ERROR: {details['message']}\n", file=sys.stderr)
    print(f"name: {details['name']}\nreason: {details['reason']}\n", file=sys.stderr)
    print(stack, file=sys.stderr)
    return details


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Echo - pattern library and site assembler')
    parser.add_argument('--dist', type=str,
                        help='Output directory for the assembled site')
    parser.add_argument('--partials-dir', type=str,
                        help='Directory holding common, blocks and lib partials')
    parser.add_argument('--views-dir', type=str,
                        help='Directory pages and guide pages are classified against')
    parser.add_argument('--layouts', type=str,
                        help='Comma-separated glob patterns for layouts')
    parser.add_argument('--pages', type=str,
                        help='Comma-separated glob patterns for pages')
    parser.add_argument('--data', type=str,
                        help='Comma-separated glob patterns for YAML data files')
    parser.add_argument('--index', type=str,
                        help='Path of the index document')
    parser.add_argument('--default-layout', type=str,
                        help='Layout used when a page does not name one')
    parser.add_argument('--default-module-layout', type=str,
                        help='Layout rendered as the body of partial preview pages')
    parser.add_argument('--id-delimiter', type=str,
                        help='Delimiter between subcollection and name in partial ids')
    parser.add_argument('--dump', type=str,
                        help='Write the in-memory build state as JSON to this path')
    parser.add_argument('--log-dir', type=str,
                        help='Directory for build log files')
    parser.add_argument('--pretty', action='store_true', default=None,
                        help='Pretty-print generated HTML')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file and starter structure')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Handle init command
    if args.init:
        settings_loader = EchoSettings()
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")

        print("\nCreating starter project structure...")
        create_starter_structure()
        return

    # Load settings from configuration file
    settings_loader = EchoSettings()
    settings_loader.load_settings()

    # Command line arguments take precedence
    args_dict = {k: v for k, v in vars(args).items() if v is not None and k != 'init'}
    final_settings = settings_loader.merge_with_args(args_dict)

    try:
        generator = Echo(final_settings)
        generator.build()
    except Exception as e:
        handle_error(e)
        sys.exit(1)


if __name__ == '__main__':
    main()
