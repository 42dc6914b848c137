from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from rich.console import Console

from ..configs.base import (
    AdaBoostConfig,
    GmmGenerateConfig,
    HmmGenerateConfig,
    LarsConfig,
    SplitConfig,
    load_adaboost_config,
    load_gmm_generate_config,
    load_hmm_generate_config,
    load_lars_config,
    load_split_config,
)
from ..data.split import SplitWorkflow
from ..errors import ToolkitError
from ..instrumentation.logger import RunLogger
from ..ml.hidden_markov import HmmGenerateWorkflow
from ..ml.mixture import GmmGenerateWorkflow
from ..ml.regression import LarsWorkflow
from ..ml.training import AdaBoostWorkflow

# program name -> (config class, YAML loader, workflow class, banner)
PROGRAMS: Dict[str, Tuple[type, Callable[[Path], Any], type, str]] = {
    "preprocess_split": (SplitConfig, load_split_config, SplitWorkflow, "Split Data"),
    "adaboost": (AdaBoostConfig, load_adaboost_config, AdaBoostWorkflow, "AdaBoost"),
    "lars": (LarsConfig, load_lars_config, LarsWorkflow, "LARS"),
    "gmm_generate": (
        GmmGenerateConfig,
        load_gmm_generate_config,
        GmmGenerateWorkflow,
        "GMM Sample Generator",
    ),
    "hmm_generate": (
        HmmGenerateConfig,
        load_hmm_generate_config,
        HmmGenerateWorkflow,
        "Hidden Markov Model (HMM) Sequence Generator",
    ),
}


def build_config(program: str, config_path: Optional[Path], overrides: Dict[str, Any]) -> Any:
    """Start from the YAML file (if any) and let every non-None flag override it."""
    config_cls, loader, _, _ = PROGRAMS[program]
    base = loader(config_path) if config_path is not None else config_cls()
    return base.merged(overrides)


def run_program(
    program: str,
    config_path: Optional[Path],
    overrides: Dict[str, Any],
    console: Optional[Console] = None,
) -> Any:
    """Run one program end to end, turning fatal toolkit errors into exit status 1."""
    console = console or Console()
    logger = RunLogger(console)
    _, _, workflow_cls, banner = PROGRAMS[program]
    try:
        config = build_config(program, config_path, overrides)
        logger.section(banner)
        result = workflow_cls(config, logger).run()
    except ToolkitError as exc:
        console.print(f"[red]Fatal:[/red] {exc}", highlight=False)
        raise SystemExit(1) from exc
    if logger.timers:
        logger.summary()
    return result
