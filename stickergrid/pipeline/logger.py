"""
PipelineLogger: Structured JSON logging for the sticker grid pipeline
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

DEFAULT_LOG_FILE = Path.home() / ".local/share/stickergrid/debug.log"


class PipelineLogger:
    """Logger with per-grid JSON stage records and debug modes"""

    def __init__(
        self,
        log_file: Optional[Path] = None,
        debug_mode: bool = False,
        verbose: bool = False,
    ):
        self.log_file = Path(log_file) if log_file is not None else None
        self.debug_mode = debug_mode
        self.verbose = verbose
        self.current_grid: Optional[Dict[str, Any]] = None
        self.logs: list[Dict[str, Any]] = []

        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("stickergrid.pipeline")
        self.logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    def start_grid(self, name: str):
        """Start logging for a new grid (or standalone image)"""
        self.current_grid = {
            "grid": name,
            "timestamp": datetime.now().isoformat(),
            "stages": [],
        }

    def log_s1(self, **kwargs):
        """Log Stage 1: Grid Composite"""
        self._log_stage("s1_composite", kwargs)

    def log_s2(self, **kwargs):
        """Log Stage 2: Background Removal"""
        self._log_stage("s2_background_removal", kwargs)

    def log_s3(self, **kwargs):
        """Log Stage 3: Seam Erasure"""
        self._log_stage("s3_seam_erasure", kwargs)

    def log_s4(self, **kwargs):
        """Log Stage 4: Grid Split"""
        self._log_stage("s4_split", kwargs)

    def _log_stage(self, stage_name: str, data: Dict[str, Any]):
        """Internal method to log a stage"""
        if self.current_grid is None:
            # Stage called outside a pipeline run
            self.logger.debug("[%s] %s", stage_name, json.dumps(data, default=str))
            return

        stage_log = {
            "stage": stage_name,
            "timestamp": datetime.now().isoformat(),
            **data,
        }
        self.current_grid["stages"].append(stage_log)

        if self.debug_mode:
            print(f"[{stage_name}] {json.dumps(data, indent=2, default=str)}")

    def log_info(self, message: str):
        """Log info message"""
        self.logger.info(message)
        if self.verbose:
            print(f"INFO: {message}")

    def log_warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)
        print(f"WARNING: {message}")

    def log_error(self, message: str, exc_info: bool = False):
        """Log error message"""
        self.logger.error(message, exc_info=exc_info)
        print(f"ERROR: {message}")

    def save_grid_log(self):
        """Save current grid log to file"""
        if self.current_grid is None:
            return

        self.logs.append(self.current_grid)

        if self.log_file is not None:
            with open(self.log_file, "a") as f:
                json.dump(self.current_grid, f, default=str)
                f.write("\n")

        self.current_grid = None
