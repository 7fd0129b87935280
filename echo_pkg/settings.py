#!/usr/bin/env python3
"""
Settings loader for the Echo site assembler.
Supports configuration from echo.yml, echo.yaml, or echo.json files.
"""

import os
import json
import yaml
from typing import Dict, Any, Optional


class EchoSettings:
    """Load and manage Echo configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        # Partials: patterns below are relative to partials_dir
        'partials_dir': 'src/partials/',
        'common': 'common/**/*',
        'blocks': 'blocks/**/*',
        'partial_lib': 'lib/**/*',
        # How to delimit subcollections in ids
        'id_delimiter': '__',
        # Views: pages and guide pages are classified relative to views_dir
        'views_dir': 'src/views/',
        'layouts': ['src/views/layouts/*'],
        'default_layout': 'default',
        'default_module_layout': 'module',
        'guide_includes': ['src/views/guide/echo/*'],
        'guide_pages': ['src/views/guide/**/*', '!src/views/guide/echo/**'],
        'pages': ['src/views/pages/*'],
        'data': ['src/data/*'],
        'index': 'src/views/index.html',
        # Build
        'dist': './dist',
        'extract_spec': True,
        'pretty': False,
        'dump': None,
        'log_dir': 'logs'
    }

    # Keys holding glob pattern lists
    LIST_KEYS = ('layouts', 'guide_includes', 'guide_pages', 'pages', 'data')

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['echo.yml', 'echo.yaml', 'echo.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            try:
                loaded_settings = self._load_config_file(config_file)
                if loaded_settings:
                    # Merge with defaults, giving preference to loaded settings
                    self.settings.update(self._normalize(loaded_settings))
                    print(f"Loaded configuration from: {os.path.relpath(config_file)}")
            except (ValueError, IOError, OSError) as e:
                print(f"Warning: Failed to load config file {config_file}: {e}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    loaded = yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    loaded = json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        except (IOError, OSError) as e:
            raise IOError(f"Error reading configuration file {config_path}: {e}")

        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")
        return loaded

    def _normalize(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Accept camelCase keys and comma-separated pattern lists."""
        normalized = {}
        for key, value in values.items():
            key = CAMEL_KEYS.get(key, key)
            if key in self.LIST_KEYS and isinstance(value, str):
                value = [item.strip() for item in value.split(',') if item.strip()]
            normalized[key] = value
        return normalized

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        if file_format not in ['yml', 'yaml', 'json']:
            raise ValueError(f"Unsupported config file format: {file_format}")

        filename = f'echo.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# Echo Configuration File\n\n")
                    f.write("# Partials\n")
                    f.write("partials_dir: src/partials/\n")
                    f.write("common: common/**/*\n")
                    f.write("blocks: blocks/**/*\n")
                    f.write("partial_lib: lib/**/*  # registered for inclusion only\n")
                    f.write("id_delimiter: __\n\n")
                    f.write("# Views\n")
                    f.write("views_dir: src/views/\n")
                    f.write("layouts:\n  - src/views/layouts/*\n")
                    f.write("default_layout: default\n")
                    f.write("default_module_layout: module\n")
                    f.write("guide_includes:\n  - src/views/guide/echo/*\n")
                    f.write("guide_pages:\n  - src/views/guide/**/*\n  - '!src/views/guide/echo/**'\n")
                    f.write("pages:\n  - src/views/pages/*\n")
                    f.write("index: src/views/index.html\n\n")
                    f.write("# Site data\n")
                    f.write("data:\n  - src/data/*\n\n")
                    f.write("# Build settings\n")
                    f.write("dist: ./dist\n")
                    f.write("pretty: false\n")
                    f.write("dump: null  # e.g. dist/echo.json\n")
                elif file_format == 'json':
                    sample = dict(self.DEFAULT_SETTINGS)
                    sample.pop('log_dir')
                    json.dump(sample, f, indent=2)
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")
        except (IOError, OSError) as e:
            raise IOError(f"Error writing configuration file {config_path}: {e}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in self._normalize(args_dict).items():
            if value is not None:
                merged[key] = value

        return merged


# camelCase aliases accepted in config files
CAMEL_KEYS = {
    'partialsDir': 'partials_dir',
    'partialLib': 'partial_lib',
    'idDelimiter': 'id_delimiter',
    'viewsDir': 'views_dir',
    'defaultLayout': 'default_layout',
    'defaultModuleLayout': 'default_module_layout',
    'guideIncludes': 'guide_includes',
    'guidePages': 'guide_pages',
    'guidepages': 'guide_pages',
    'extractSpec': 'extract_spec',
    'logDir': 'log_dir',
}
