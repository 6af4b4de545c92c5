"""
Run Settings
============
Settings come from three layers, later ones winning:

1. built-in defaults
2. an optional YAML config file (``--config``)
3. command-line flags

Example config file::

    root_folder: C:/Scans/Site01
    template_name: FastTrack
    output_folder_path: C:/Scans/Site01/out
    encoding: utf-8-sig
    date_formats: ["%d/%m/%Y", "%Y-%m-%d"]
    log_level: INFO
"""

import argparse
import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import yaml

from .constants import DEFAULT_ENCODING, DEFAULT_TEMPLATE_NAME
from .errors import MissingArgumentError
from .progress import ProgressCallback

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "root_folder": None,
    "template_name": DEFAULT_TEMPLATE_NAME,
    "template_file_path": None,
    "output_folder_path": None,
    "encoding": DEFAULT_ENCODING,
    "date_formats": None,
    "log_level": "INFO",
}


@dataclass
class Settings:
    """Everything one generator run needs."""
    root_folder: str
    template_name: str = DEFAULT_TEMPLATE_NAME
    template_file_path: Optional[str] = None
    output_folder_path: Optional[str] = None
    encoding: str = DEFAULT_ENCODING
    date_formats: Optional[list] = None
    log_level: str = "INFO"
    progress_callback: Optional[ProgressCallback] = field(default=None, repr=False)

    @property
    def output_folder(self) -> str:
        """Output folder; the root folder when none was given."""
        return self.output_folder_path or self.root_folder


def load_config(config_path):
    """Load configuration from a YAML file, merged over the defaults."""
    config = dict(DEFAULT_CONFIG)
    if config_path and os.path.exists(config_path):
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}
        unknown = set(user_config) - set(DEFAULT_CONFIG)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        config.update({k: v for k, v in user_config.items() if k in DEFAULT_CONFIG})
    elif config_path:
        logger.warning(f"Config file {config_path} not found, using defaults")
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv-to-workbook",
        description="Combine a folder of CSV scan reports into one Excel workbook",
    )
    parser.add_argument(
        "-s", "--source", dest="root_folder", default=None,
        help="Root folder holding SummaryReport.csv and the ScannerReports folder (required)"
    )
    parser.add_argument(
        "-t", "--template", dest="template_name", default=None,
        help=f"Name of a built-in workbook template (default: {DEFAULT_TEMPLATE_NAME})"
    )
    parser.add_argument(
        "-tp", "--template-path", dest="template_file_path", default=None,
        help="Path to an Excel workbook used as the template (overrides -t)"
    )
    parser.add_argument(
        "-o", "--output", dest="output_folder_path", default=None,
        help="Output folder (default: the source folder)"
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to config YAML file"
    )
    parser.add_argument(
        "--encoding", default=None,
        help=f"Encoding of the CSV files (default: {DEFAULT_ENCODING})"
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        help="Logging level: DEBUG, INFO, WARNING, ERROR"
    )
    return parser


def parse_settings(argv=None) -> Settings:
    """Build :class:`Settings` from command-line arguments and the optional config file.

    Raises:
        MissingArgumentError: if no root folder was given on the command
            line or in the config file.
    """
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    # Apply command-line overrides
    for key in ("root_folder", "template_name", "template_file_path",
                "output_folder_path", "encoding", "log_level"):
        value = getattr(args, key)
        if value is not None:
            config[key] = value

    if not config["root_folder"]:
        raise MissingArgumentError("-s")

    return Settings(
        root_folder=config["root_folder"],
        template_name=config["template_name"] or DEFAULT_TEMPLATE_NAME,
        template_file_path=config["template_file_path"],
        output_folder_path=config["output_folder_path"],
        encoding=config["encoding"] or DEFAULT_ENCODING,
        date_formats=config["date_formats"],
        log_level=config["log_level"] or "INFO",
    )
