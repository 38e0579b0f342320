import logging
import os
import pathlib

import zirconium as zr
import zrlog

from chaos import __VERSION__


def _config_paths():
    yield pathlib.Path(".").absolute()
    yield pathlib.Path("~").expanduser().absolute()
    custom_config_path = os.environ.get("CHAOS_CONFIG_SEARCH_PATHS", "./config")
    if custom_config_path:
        paths = custom_config_path.split(";")
        for path in paths:
            if path:
                p = pathlib.Path(path).absolute()
                if p.exists():
                    yield p


def init_chaos(app_type: str):
    """Register the configuration files for the given application type and set up logging defaults."""

    @zr.configure
    def set_config(app_config: zr.ApplicationConfig):
        config_paths = [x for x in _config_paths()]
        logging.getLogger("chaos.boot").info(f"Config Search Paths: {';'.join(str(x) for x in config_paths)}")
        for path in config_paths:
            app_config.register_default_file(path / ".chaos.defaults.toml")
            app_config.register_default_file(path / f".chaos.{app_type}.defaults.toml")
            app_config.register_file(path / ".chaos.toml")
            app_config.register_file(path / f".chaos.{app_type}.toml")

    zrlog.set_default_extra("app_type", app_type)
    zrlog.set_default_extra("version", __VERSION__)
