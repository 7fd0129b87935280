import os
import time
import logging
from datetime import datetime

import yaml

from .context import build_context
from .errors import LayoutError, ParseError
from .files import ensure_dir, read_file, resolve_globs
from .frontmatter import load_document
from .markup import create_markdown_parser
from .names import name_of, title_case
from .rendering import Renderer
from .settings import EchoSettings
from .state import BuildState
from .taxonomy import (
    ANCHOR_SLUGS, PAGE, PARTIAL, PATH_SLUGS, LeafNode, TaxonomyBuilder, TaxonomyRoot
)
from .writer import OutputWriter


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno > logging.INFO:
            return True
        allowed_messages = [
            "Site build completed in",
            "Total pages generated:",
            "Total partials registered:",
            "Wrote state dump to",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


class Echo:
    """Assemble a site from partials, pages, layouts and data files."""

    def __init__(self, settings=None, **overrides):
        self.settings = EchoSettings.DEFAULT_SETTINGS.copy()
        self.settings.update(settings or {})
        self.settings.update({k: v for k, v in overrides.items() if v is not None})

        self.dist = self.settings['dist']
        self.id_delimiter = self.settings['id_delimiter']
        self.default_layout = self.settings['default_layout']
        self.default_module_layout = self.settings['default_module_layout']

        self.pages_generated = 0
        self.partials_registered = 0
        self.state = None

        self.setup_logging()
        self.markdown_parser = create_markdown_parser()

    def setup_logging(self):
        """Set up logging configuration."""
        self.logger = logging.getLogger('Echo')

        if not self.logger.handlers:
            self.logger.setLevel(logging.INFO)

            # Console handler with filter
            console_handler = logging.StreamHandler()
            console_handler.setLevel(logging.INFO)
            console_handler.addFilter(InfoFilter())
            console_formatter = logging.Formatter('%(message)s')
            console_handler.setFormatter(console_formatter)
            self.logger.addHandler(console_handler)

            # File handler for all logs
            logs_dir = self.settings.get('log_dir')
            if logs_dir:
                os.makedirs(logs_dir, exist_ok=True)
                log_filename = datetime.now().strftime('echo_%Y-%m-%d_%H-%M-%S.log')
                file_handler = logging.FileHandler(os.path.join(logs_dir, log_filename))
                file_handler.setLevel(logging.DEBUG)
                file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
                file_handler.setFormatter(file_formatter)
                self.logger.addHandler(file_handler)
                self.logger.setLevel(logging.DEBUG)

    def markdown_filter(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text)

    def taxonomy_roots(self):
        """The partial, guide page and page roots, in build order."""
        partials_dir = self.settings['partials_dir']
        views_dir = self.settings['views_dir']
        partial_patterns = [
            os.path.join(partials_dir, self.settings[key])
            for key in ('common', 'blocks', 'partial_lib')
        ]
        library_parents = tuple(
            self.settings['partial_lib'].replace('\\', '/').split('/', 1)[:1]
        )
        return [
            TaxonomyRoot('partials', partials_dir, partial_patterns,
                         node_type=PARTIAL, slug_style=ANCHOR_SLUGS,
                         register_partials=True, library_parents=library_parents,
                         preserve_numbers=True),
            TaxonomyRoot('guide', views_dir, self.settings['guide_pages'],
                         node_type=PAGE, slug_style=PATH_SLUGS),
            TaxonomyRoot('pages', views_dir, self.settings['pages'],
                         node_type=PAGE, slug_style=PATH_SLUGS),
        ]

    def setup(self):
        """Parse every source into a fresh build state."""
        state = BuildState()
        builder = TaxonomyBuilder(
            state,
            markdown=self.markdown_filter,
            id_delimiter=self.id_delimiter,
            extract_spec=self.settings['extract_spec']
        )
        partials_root, *page_roots = self.taxonomy_roots()

        builder.build(partials_root)
        self.parse_guide_includes(state)
        self.parse_layouts(state)
        self.parse_data(state)
        for root in page_roots:
            builder.build(root)
        self.parse_index(state)
        return state

    def parse_guide_includes(self, state):
        """Register guide includes as partials under their file name."""
        for file_path in resolve_globs(self.settings['guide_includes']):
            state.registry.register(name_of(file_path), read_file(file_path), source=file_path)

    def parse_layouts(self, state):
        state.layouts = {}
        for file_path in resolve_globs(self.settings['layouts']):
            state.layouts[name_of(file_path)] = read_file(file_path)
        self.logger.debug(f"Layouts: {', '.join(state.layouts) or 'none'}")

    def parse_data(self, state):
        """Load YAML site data, one key per file."""
        state.data = {}
        for file_path in resolve_globs(self.settings['data']):
            try:
                state.data[name_of(file_path)] = yaml.safe_load(read_file(file_path))
            except yaml.YAMLError as e:
                raise ParseError(f"Invalid YAML: {e}", file_path) from e

    def parse_index(self, state):
        index_path = self.settings.get('index')
        if not index_path or not os.path.isfile(index_path):
            self.logger.debug("No index document found")
            return
        doc = load_document(index_path, markdown=self.markdown_filter,
                            extract_spec=self.settings['extract_spec'])
        state.index = LeafNode(
            id='index',
            name=title_case('index'),
            slug='index',
            type=PAGE,
            partial_id='index',
            output_path=state.claim_output_path('index.html'),
            source=index_path,
            data=doc.data,
            html=doc.body,
            notes=doc.notes,
            spec=doc.spec,
        )

    def get_layout(self, state, name):
        if name not in state.layouts:
            raise LayoutError(f"Layout '{name}' not found")
        return state.layouts[name]

    def render_leaf(self, state, renderer, leaf):
        """
        Render one leaf inside its layout.

        Partials with a module layout available render that layout as their
        body instead of their own html; the module layout pulls the partial
        in through ``{% include partial_id %}``.
        """
        context, layout_name = build_context(leaf, state, self.default_layout)
        layout = self.get_layout(state, layout_name)

        body = leaf.html
        if leaf.type == PARTIAL and self.default_module_layout in state.layouts:
            body = state.layouts[self.default_module_layout]

        node_id = leaf.partial_id if leaf.type == PARTIAL else leaf.slug
        return renderer.render(body, layout, context, node_id=node_id, layout_name=layout_name)

    def build(self):
        """Run a complete build; returns the build state."""
        start_time = time.time()
        self.pages_generated = 0

        self.state = state = self.setup()
        self.partials_registered = len(state.registry)

        ensure_dir(self.dist)
        renderer = Renderer(state.registry)
        writer = OutputWriter(self.dist, pretty=self.settings['pretty'])

        for leaf in state.leaves():
            writer.write(leaf.output_path, self.render_leaf(state, renderer, leaf))
            self.pages_generated += 1

        dump_path = self.settings.get('dump')
        if dump_path:
            writer.dump(dump_path, state)
            self.logger.info(f"Wrote state dump to {dump_path}")

        self.logger.info(f"Site build completed in {time.time() - start_time:.6f} seconds.")
        self.logger.info(f"Total pages generated: {self.pages_generated}")
        self.logger.info(f"Total partials registered: {self.partials_registered}")
        return state
