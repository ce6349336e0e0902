# src/nnloss/logger.py
import json
import logging
import logging.config
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .config import CONFIG


def setup_logging(
    log_config: Optional[Union[Path, str]] = None,
    save_dir: Optional[Union[Path, str]] = None,
    default_level: Optional[int] = None,
) -> None:
    """
    Setup logging configuration.

    Only applications should call this; the library itself just creates
    module loggers.

    Parameters
    ----------
    log_config : pathlib.Path or str, optional
        JSON file in logging.config.dictConfig format.

    save_dir : pathlib.Path or str, optional
        Directory that relative handler filenames are placed in.

    default_level : int, optional
        Level for basicConfig when no config file is used (default is the
        configured log_level).
    """
    if default_level is None:
        default_level = logging.getLevelName(str(CONFIG["log_level"]).upper())

    if log_config is not None and Path(log_config).is_file():
        with Path(log_config).open("rt") as handle:
            config: Dict[str, Any] = json.load(handle)

        if save_dir is not None:
            for handler in config.get("handlers", {}).values():
                if "filename" in handler:
                    handler["filename"] = str(Path(save_dir) / handler["filename"])

        logging.config.dictConfig(config)

    else:
        if log_config is not None:
            logging.getLogger(__name__).warning(
                "Logging configuration file is not found in %s.", log_config
            )
        logging.basicConfig(level=default_level)
