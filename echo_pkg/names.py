"""
Identifier helpers: names from file paths, display titles and slugs.
"""

import os
import re


def name_of(file_path, preserve_numbers=False):
    """
    Get the name of a file (minus extension) from a path.

    './src/materials/structures/foo.html' -> 'foo'
    './src/materials/structures/02-bar.html' -> 'bar'
    """
    name = os.path.splitext(os.path.basename(file_path))[0]
    name = re.sub(r'\s', '-', name)
    if preserve_numbers:
        return name
    # Strip ordering prefixes like '02-' or '1.2.'
    return re.sub(r'^[0-9.\-]+', '', name)


def title_case(name):
    """Convert a file name to title case."""
    spaced = re.sub(r'[-_]', ' ', name)
    return re.sub(r'\w\S*', lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), spaced)


def slugify(name):
    """Turn a name into a URL and filesystem safe token."""
    slug = name.lower()
    slug = re.sub(r'\s+', '-', slug)
    slug = re.sub(r'[^A-Za-z0-9_-]', '', slug)
    slug = re.sub(r'-{2,}', '-', slug)
    return slug.strip('-')


def namespace_key(partial_id):
    """Template variable name under which a partial's own data is exposed."""
    key = re.sub(r'\W', '_', partial_id)
    if not key or key[0].isdigit():
        key = '_' + key
    return key
